"""Schema model operations.

Every operation is pure: it takes a ``FormSchema`` (or field) and returns a
new snapshot, leaving the input untouched. Operations that change fields,
settings or metadata stamp ``metadata.updated_at`` with ``now``; callers
inject the clock, and ``get_now()`` is only the fallback.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from .consts import (
    COPY_LABEL_SUFFIX,
    DEFAULT_FORM_TITLE,
    DEFAULT_SUBMIT_BUTTON_TEXT,
    DEFAULT_SUCCESS_MESSAGE,
    SCHEMA_VERSION,
)
from .enums import FieldType
from .errors import DuplicateFieldIdError, FieldIndexError
from .form_schema import (
    FieldSchema,
    FormMetadata,
    FormSchema,
    FormSettings,
    SubmitButton,
)
from .registry import get_field_definition
from .utils import get_now, new_id

logger = logging.getLogger(__name__)


def create_empty_schema(
    now: Optional[datetime] = None,
    *,
    title: str = DEFAULT_FORM_TITLE,
    submit_text: str = DEFAULT_SUBMIT_BUTTON_TEXT,
    success_message: str = DEFAULT_SUCCESS_MESSAGE,
) -> FormSchema:
    now = now or get_now()
    return FormSchema(
        version=SCHEMA_VERSION,
        id=new_id(),
        metadata=FormMetadata(title=title, description="", created_at=now, updated_at=now),
        fields=[],
        settings=FormSettings(
            submit_button=SubmitButton(text=submit_text, enabled=True),
            success_message=success_message,
        ),
    )


def create_field(field_type: FieldType | str, order: int) -> FieldSchema:
    """Create a field with a fresh id, label and config from the catalog."""
    definition = get_field_definition(field_type)
    return FieldSchema(
        id=new_id(),
        type=definition.type,
        label=definition.label,
        config=definition.default_config.model_copy(deep=True),
        order=order,
    )


def clone_field(field: FieldSchema, order: int) -> FieldSchema:
    return field.model_copy(
        update={
            "id": new_id(),
            "order": order,
            "label": f"{field.label}{COPY_LABEL_SUFFIX}",
        },
        deep=True,
    )


def touch(schema: FormSchema, now: Optional[datetime] = None) -> FormSchema:
    """Stamp ``metadata.updated_at``."""
    metadata = schema.metadata.model_copy(update={"updated_at": now or get_now()})
    return schema.model_copy(update={"metadata": metadata})


def _renumber(fields: list[FieldSchema]) -> list[FieldSchema]:
    return [
        field if field.order == index else field.model_copy(update={"order": index})
        for index, field in enumerate(fields)
    ]


def _with_fields(
    schema: FormSchema, fields: list[FieldSchema], now: Optional[datetime]
) -> FormSchema:
    return touch(schema.model_copy(update={"fields": _renumber(fields)}), now)


def add_field(
    schema: FormSchema,
    field_type: FieldType | str,
    position: Optional[int] = None,
    now: Optional[datetime] = None,
) -> FormSchema:
    """Insert a new field of ``field_type`` at ``position`` (default: end).

    The inserted field is ``result.fields[position]``.

    Raises:
        FieldIndexError: position is outside ``0..len(fields)``
    """
    count = len(schema.fields)
    if position is None:
        position = count
    if not 0 <= position <= count:
        raise FieldIndexError(f"Insert position {position} out of range 0..{count}")

    field = create_field(field_type, position)
    fields = list(schema.fields)
    fields.insert(position, field)
    logger.debug(f"Added {field.type.value} field {field.id} at {position}")
    return _with_fields(schema, fields, now)


def update_field(
    schema: FormSchema,
    field_id: str,
    changes: dict[str, Any],
    now: Optional[datetime] = None,
) -> FormSchema:
    """Shallow-merge ``changes`` into the field with ``field_id``.

    ``changes`` uses attribute names (``label``, ``config``, ``conditions``,
    ...); nested values may be models or plain dicts. Returns ``schema``
    unchanged when no field has ``field_id``.

    Raises:
        DuplicateFieldIdError: ``changes`` renames the field to an id
            another field already has
    """
    index = schema.index_of(field_id)
    if index < 0:
        return schema

    current = schema.fields[index]
    updated = FieldSchema.model_validate({**dict(current), **changes})
    if updated.id != field_id and schema.index_of(updated.id) >= 0:
        raise DuplicateFieldIdError(f"Field id {updated.id} is already in use")

    fields = list(schema.fields)
    fields[index] = updated
    return _with_fields(schema, fields, now)


def remove_field(
    schema: FormSchema, field_id: str, now: Optional[datetime] = None
) -> FormSchema:
    """Remove a field and every conditional rule that references it.

    A field left with no rules loses its ``conditions`` entirely, which
    makes it always visible. Returns ``schema`` unchanged when no field has
    ``field_id``.
    """
    if schema.index_of(field_id) < 0:
        return schema

    fields: list[FieldSchema] = []
    for field in schema.fields:
        if field.id == field_id:
            continue
        if field.conditions is None:
            fields.append(field)
            continue

        rules = [r for r in field.conditions.rules if r.field != field_id]
        if len(rules) == len(field.conditions.rules):
            fields.append(field)
        elif not rules:
            logger.debug(f"Dropped conditions of field {field.id} (referenced {field_id})")
            fields.append(field.model_copy(update={"conditions": None}))
        else:
            conditions = field.conditions.model_copy(update={"rules": rules})
            fields.append(field.model_copy(update={"conditions": conditions}))

    return _with_fields(schema, fields, now)


def duplicate_field(
    schema: FormSchema, field_id: str, now: Optional[datetime] = None
) -> FormSchema:
    """Insert a copy of the field right after it; the copy is at index + 1.

    Returns ``schema`` unchanged when no field has ``field_id``.
    """
    index = schema.index_of(field_id)
    if index < 0:
        return schema

    fields = list(schema.fields)
    fields.insert(index + 1, clone_field(fields[index], index + 1))
    return _with_fields(schema, fields, now)


def reorder_field(
    schema: FormSchema,
    from_index: int,
    to_index: int,
    now: Optional[datetime] = None,
) -> FormSchema:
    """Move the field at ``from_index`` to ``to_index``.

    Raises:
        FieldIndexError: either index is outside ``0..len(fields) - 1``
    """
    count = len(schema.fields)
    for name, index in (("from_index", from_index), ("to_index", to_index)):
        if not 0 <= index < count:
            raise FieldIndexError(f"{name} {index} out of range for {count} fields")

    fields = list(schema.fields)
    moved = fields.pop(from_index)
    fields.insert(to_index, moved)
    return _with_fields(schema, fields, now)


def update_metadata(
    schema: FormSchema, now: Optional[datetime] = None, **changes: Any
) -> FormSchema:
    metadata = schema.metadata.model_validate({**dict(schema.metadata), **changes})
    return touch(schema.model_copy(update={"metadata": metadata}), now)


def update_settings(
    schema: FormSchema, now: Optional[datetime] = None, **changes: Any
) -> FormSchema:
    settings = schema.settings.model_validate({**dict(schema.settings), **changes})
    return touch(schema.model_copy(update={"settings": settings}), now)
