"""Single-owner session around one form schema.

The session is the only holder of the current ``FormSchema`` snapshot: each
edit replaces it with the snapshot returned by the builder. It also keeps
the answers collected while previewing or filling in the form.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from . import builder
from .dependencies import detect_circular_dependencies
from .enums import BuilderMode, FieldType
from .form_schema import FieldSchema, FormData, FormSchema, FormValidationResult
from .utils import get_now
from .validation import validate_form
from .visibility import visible_fields

logger = logging.getLogger(__name__)


class FormSession:
    def __init__(
        self,
        schema: Optional[FormSchema] = None,
        *,
        clock: Callable[[], datetime] = get_now,
        defaults: Optional[dict[str, str]] = None,
    ) -> None:
        self._clock = clock
        self._defaults = defaults or {}
        self.current_form = schema or self._empty_schema()
        self.form_data: FormData = {}
        self.mode = BuilderMode.BUILDER
        self.selected_field_id: Optional[str] = None

    def _empty_schema(self) -> FormSchema:
        return builder.create_empty_schema(self._clock(), **self._defaults)

    def set_mode(self, mode: BuilderMode | str) -> None:
        self.mode = BuilderMode(mode)

    def select_field(self, field_id: Optional[str]) -> None:
        self.selected_field_id = field_id

    # ==================== Form ====================

    def new_form(self) -> FormSchema:
        self.current_form = self._empty_schema()
        self.form_data = {}
        self.selected_field_id = None
        return self.current_form

    def load_form(self, schema: FormSchema) -> FormSchema:
        """Take ownership of an already migrated schema."""
        self.current_form = schema
        self.form_data = {}
        self.selected_field_id = None
        logger.info(f"Loaded form {schema.id} ({len(schema.fields)} fields)")
        self.circular_dependencies()
        return schema

    def update_metadata(self, **changes: Any) -> FormSchema:
        self.current_form = builder.update_metadata(self.current_form, self._clock(), **changes)
        return self.current_form

    def update_settings(self, **changes: Any) -> FormSchema:
        self.current_form = builder.update_settings(self.current_form, self._clock(), **changes)
        return self.current_form

    # ==================== Fields ====================

    def add_field(self, field_type: FieldType | str, position: Optional[int] = None) -> FieldSchema:
        """Add a field and select it."""
        if position is None:
            position = len(self.current_form.fields)
        self.current_form = builder.add_field(
            self.current_form, field_type, position, self._clock()
        )
        field = self.current_form.fields[position]
        self.selected_field_id = field.id
        return field

    def update_field(self, field_id: str, **changes: Any) -> FormSchema:
        self.current_form = builder.update_field(
            self.current_form, field_id, changes, self._clock()
        )
        return self.current_form

    def remove_field(self, field_id: str) -> FormSchema:
        self.current_form = builder.remove_field(self.current_form, field_id, self._clock())
        self.form_data = {k: v for k, v in self.form_data.items() if k != field_id}
        if self.selected_field_id == field_id:
            self.selected_field_id = None
        return self.current_form

    def duplicate_field(self, field_id: str) -> Optional[FieldSchema]:
        """Duplicate a field and select the copy; None when the id is unknown."""
        index = self.current_form.index_of(field_id)
        if index < 0:
            return None
        self.current_form = builder.duplicate_field(self.current_form, field_id, self._clock())
        copy = self.current_form.fields[index + 1]
        self.selected_field_id = copy.id
        return copy

    def reorder_field(self, from_index: int, to_index: int) -> FormSchema:
        self.current_form = builder.reorder_field(
            self.current_form, from_index, to_index, self._clock()
        )
        return self.current_form

    def circular_dependencies(self) -> list[str]:
        cycles = detect_circular_dependencies(self.current_form.fields)
        if cycles:
            logger.warning(
                f"Form {self.current_form.id} has conditional dependency cycles "
                f"entered at: {', '.join(cycles)}"
            )
        return cycles

    # ==================== Answers ====================

    def set_field_value(self, field_id: str, value: Any) -> None:
        self.form_data = {**self.form_data, field_id: value}

    def reset_form_data(self) -> None:
        self.form_data = {}

    def visible_fields(self) -> list[FieldSchema]:
        return visible_fields(self.current_form.fields, self.form_data)

    def submit(self) -> FormValidationResult:
        """Validate the answers; a valid submission clears them."""
        result = validate_form(self.current_form.fields, self.form_data)
        if result.valid:
            logger.info(f"Form {self.current_form.id} submitted")
            self.reset_form_data()
        else:
            logger.info(
                f"Form {self.current_form.id} submission rejected: "
                f"{len(result.errors)} field error(s)"
            )
        return result
