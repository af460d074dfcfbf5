"""Validation engine.

``validate_field`` checks one answer against a field's declared rules and
its type-specific constraints; ``validate_form`` runs it for every visible,
value-bearing field. Failures are returned as data, never raised.
Configuration gaps (an uncompilable pattern, a file that carries neither a
MIME type nor an extension) make the affected check inapplicable and are
logged.
"""

import logging
import re
from typing import Any, Optional, Sequence
from urllib.parse import urlsplit

from .consts import BYTES_PER_MB, EMAIL_PATTERN, ErrorMessages
from .enums import FieldType, ValidationType
from .form_schema import (
    VALUELESS_TYPES,
    FieldSchema,
    FileUpload,
    FormData,
    FormValidationResult,
    ValidationResult,
    ValidationRule,
)
from .utils import is_empty, is_number
from .visibility import is_visible

logger = logging.getLogger(__name__)

VALID = ValidationResult(valid=True)

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_NETLOC_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})


def _fail(message: str) -> ValidationResult:
    return ValidationResult(valid=False, error=message)


def is_valid_email(value: str) -> bool:
    return _EMAIL_RE.fullmatch(value) is not None


def is_absolute_url(value: str) -> bool:
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False

    if not parts.scheme or not _SCHEME_RE.fullmatch(parts.scheme):
        return False
    if any(ch.isspace() for ch in parts.netloc):
        return False
    if parts.scheme.lower() in _NETLOC_SCHEMES:
        return bool(parts.netloc)
    return bool(parts.netloc or parts.path or parts.query)


def validate_rule(rule: ValidationRule, value: Any) -> ValidationResult:
    """Apply a single declared rule to a non-empty value.

    Rules whose operands have the wrong types do not apply and pass.
    """
    kind = rule.kind

    if kind == ValidationType.REQUIRED:
        if is_empty(value):
            return _fail(rule.message or ErrorMessages.REQUIRED)
        return VALID

    if kind == ValidationType.MIN_LENGTH:
        if isinstance(value, str) and is_number(rule.value) and len(value) < rule.value:
            return _fail(rule.message or ErrorMessages.min_length(rule.value))
        return VALID

    if kind == ValidationType.MAX_LENGTH:
        if isinstance(value, str) and is_number(rule.value) and len(value) > rule.value:
            return _fail(rule.message or ErrorMessages.max_length(rule.value))
        return VALID

    if kind == ValidationType.MIN:
        if is_number(value) and is_number(rule.value) and value < rule.value:
            return _fail(rule.message or ErrorMessages.min_value(rule.value))
        return VALID

    if kind == ValidationType.MAX:
        if is_number(value) and is_number(rule.value) and value > rule.value:
            return _fail(rule.message or ErrorMessages.max_value(rule.value))
        return VALID

    if kind == ValidationType.PATTERN:
        if not (isinstance(value, str) and isinstance(rule.value, str)):
            return VALID
        try:
            regex = re.compile(rule.value)
        except re.error as e:
            logger.warning(f"Invalid regex pattern {rule.value!r}, rule skipped: {e}")
            return VALID
        if regex.search(value) is None:
            return _fail(rule.message or ErrorMessages.PATTERN_MISMATCH)
        return VALID

    if kind == ValidationType.EMAIL:
        if isinstance(value, str) and not is_valid_email(value):
            return _fail(rule.message or ErrorMessages.INVALID_EMAIL)
        return VALID

    if kind == ValidationType.URL:
        if isinstance(value, str) and not is_absolute_url(value):
            return _fail(rule.message or ErrorMessages.INVALID_URL)
        return VALID

    # ValidationType.CUSTOM is an extension point and always passes.
    return VALID


def _as_files(value: Any) -> list[FileUpload]:
    items = value if isinstance(value, (list, tuple)) else [value]
    files = []
    for item in items:
        if isinstance(item, FileUpload):
            files.append(item)
        elif isinstance(item, dict) and "name" in item:
            files.append(FileUpload.model_validate(item))
    return files


def _extension(name: str) -> str:
    _, dot, ext = name.rpartition(".")
    return f".{ext.lower()}" if dot and ext else ""


def is_file_type_accepted(file: FileUpload, accepted_types: Sequence[str]) -> Optional[bool]:
    """Match a file against ``accept`` tokens (MIME types, ``type/*`` or extensions).

    A ``type/*`` token matches only MIME types starting with ``type/``, so
    ``image/*`` rejects ``imagery/custom``.

    Returns None when the file carries neither a MIME type nor an
    extension, so the check cannot be made.
    """
    extension = _extension(file.name)
    if not file.type and not extension:
        return None

    for accepted in accepted_types:
        if accepted.endswith("/*"):
            if file.type.startswith(accepted[:-1]):
                return True
        elif accepted.startswith("."):
            if extension == accepted.lower():
                return True
        elif file.type == accepted:
            return True
    return False


def _validate_file(field: FieldSchema, value: Any) -> ValidationResult:
    config = field.config
    files = _as_files(value)

    if config.max_size is not None:
        for file in files:
            if file.size > config.max_size:
                max_size_mb = round(config.max_size / BYTES_PER_MB, 1)
                return _fail(ErrorMessages.file_too_large(max_size_mb))

    if config.accept:
        accepted_types = [t.strip() for t in config.accept.split(",") if t.strip()]
        if not accepted_types:
            return VALID
        for file in files:
            accepted = is_file_type_accepted(file, accepted_types)
            if accepted is None:
                logger.warning(
                    f"Cannot match file {file.name!r} against accept "
                    f"{config.accept!r} for field {field.id}, check skipped"
                )
            elif not accepted:
                return _fail(ErrorMessages.INVALID_FILE_TYPE)

    return VALID


def validate_field_type(field: FieldSchema, value: Any) -> ValidationResult:
    """Structural checks that depend on the field type rather than declared rules."""
    config = field.config

    if field.type == FieldType.EMAIL:
        if isinstance(value, str) and not is_valid_email(value):
            return _fail(ErrorMessages.INVALID_EMAIL)

    elif field.type in (FieldType.NUMBER, FieldType.RANGE):
        if is_number(value):
            if config.min is not None and value < config.min:
                return _fail(ErrorMessages.min_value(config.min))
            if config.max is not None and value > config.max:
                return _fail(ErrorMessages.max_value(config.max))

    elif field.type == FieldType.FILE:
        return _validate_file(field, value)

    elif field.type == FieldType.CHECKBOX:
        selections = len(value) if isinstance(value, (list, tuple)) else 0
        if config.min_selections is not None and selections < config.min_selections:
            return _fail(ErrorMessages.min_selections(config.min_selections))
        if config.max_selections is not None and selections > config.max_selections:
            return _fail(ErrorMessages.max_selections(config.max_selections))

    return VALID


def validate_field(
    field: FieldSchema, value: Any, form_data: Optional[FormData] = None
) -> ValidationResult:
    """Validate one answer; the first failing check's message wins.

    Order: required check, optional-and-empty short circuit, declared rules
    in list order, then type-specific checks. ``form_data`` is accepted for
    rules that need the other answers; none of the built-in rules do.
    """
    if is_empty(value):
        if field.is_required:
            return _fail(ErrorMessages.REQUIRED)
        return VALID

    for rule in field.validation_rules:
        result = validate_rule(rule, value)
        if not result.valid:
            return result

    return validate_field_type(field, value)


def validate_form(fields: Sequence[FieldSchema], form_data: FormData) -> FormValidationResult:
    """Validate every visible, value-bearing field.

    Section and hidden fields are skipped, and so is any field whose
    conditions currently hide it.
    """
    errors: dict[str, str] = {}

    for field in fields:
        if field.type in VALUELESS_TYPES:
            continue
        if not is_visible(field, form_data, fields):
            continue

        result = validate_field(field, form_data.get(field.id), form_data)
        if not result.valid:
            errors[field.id] = result.error

    if errors:
        logger.debug(f"Form validation failed for fields: {', '.join(errors)}")
    return FormValidationResult(valid=not errors, errors=errors)
