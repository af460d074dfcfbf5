"""Schema-driven form rule engine."""

from .builder import (
    add_field,
    create_empty_schema,
    create_field,
    duplicate_field,
    remove_field,
    reorder_field,
    update_field,
)
from .consts import SCHEMA_VERSION
from .dependencies import detect_circular_dependencies
from .form_schema import FieldSchema, FormSchema
from .migration import load_schema, migrate, validate_structure
from .validation import validate_field, validate_form
from .visibility import is_visible

__all__ = [
    "SCHEMA_VERSION",
    "FieldSchema",
    "FormSchema",
    "add_field",
    "create_empty_schema",
    "create_field",
    "detect_circular_dependencies",
    "duplicate_field",
    "is_visible",
    "load_schema",
    "migrate",
    "remove_field",
    "reorder_field",
    "update_field",
    "validate_field",
    "validate_form",
    "validate_structure",
]
