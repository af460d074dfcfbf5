"""Declarative form schema data model.

A ``FormSchema`` is the literal persisted document: ``to_document()`` emits
the camelCase JSON shape and ``FormSchema.model_validate`` reads it back.
All models are frozen; the builder produces new snapshots instead of
mutating them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .enums import ConditionOperator, FieldType, LogicOperator, ValidationType

FormData = dict[str, Any]
Number = Union[int, float]


class SchemaModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ValidationRule(SchemaModel):
    kind: ValidationType = Field(alias="type")
    value: Any = None
    message: str = ""


class ConditionalRule(SchemaModel):
    field: str
    operator: ConditionOperator
    value: Any = None


class FieldConditions(SchemaModel):
    show: bool = True
    rules: list[ConditionalRule] = Field(default_factory=list)
    logic: LogicOperator = LogicOperator.AND


class FieldOption(SchemaModel):
    label: str
    value: str
    disabled: Optional[bool] = None


# ==================== Field config variants ====================


class BaseFieldConfig(SchemaModel):
    placeholder: Optional[str] = None
    required: bool = False
    default_value: Any = None
    disabled: Optional[bool] = None
    readonly: Optional[bool] = None
    validation: list[ValidationRule] = Field(default_factory=list)
    help_text: Optional[str] = None


class TextFieldConfig(BaseFieldConfig):
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None


class NumberFieldConfig(BaseFieldConfig):
    min: Optional[Number] = None
    max: Optional[Number] = None
    step: Optional[Number] = None


class ChoiceFieldConfig(BaseFieldConfig):
    options: list[FieldOption] = Field(default_factory=list)


class SelectFieldConfig(ChoiceFieldConfig):
    multiple: Optional[bool] = None
    searchable: Optional[bool] = None


class RadioFieldConfig(ChoiceFieldConfig):
    inline: Optional[bool] = None


class CheckboxFieldConfig(ChoiceFieldConfig):
    inline: Optional[bool] = None
    min_selections: Optional[int] = None
    max_selections: Optional[int] = None


class FileFieldConfig(BaseFieldConfig):
    accept: Optional[str] = None
    max_size: Optional[int] = None
    multiple: Optional[bool] = None


class RatingFieldConfig(BaseFieldConfig):
    max_rating: Optional[int] = None
    icon: Optional[Literal["star", "heart", "thumb"]] = None


class RangeFieldConfig(BaseFieldConfig):
    min: Number = 0
    max: Number = 100
    step: Optional[Number] = None
    show_value: Optional[bool] = None


class HiddenFieldConfig(SchemaModel):
    default_value: Any = None


class SectionFieldConfig(SchemaModel):
    heading: Optional[str] = None
    description: Optional[str] = None
    divider: Optional[bool] = None


# Most specific variants first: a union member also accepts subclass instances.
FieldConfig = Union[
    TextFieldConfig,
    NumberFieldConfig,
    SelectFieldConfig,
    RadioFieldConfig,
    CheckboxFieldConfig,
    FileFieldConfig,
    RatingFieldConfig,
    RangeFieldConfig,
    HiddenFieldConfig,
    SectionFieldConfig,
    BaseFieldConfig,
]

CONFIG_TYPES: dict[FieldType, type[SchemaModel]] = {
    FieldType.TEXT: TextFieldConfig,
    FieldType.EMAIL: TextFieldConfig,
    FieldType.PASSWORD: TextFieldConfig,
    FieldType.TEXTAREA: TextFieldConfig,
    FieldType.NUMBER: NumberFieldConfig,
    FieldType.SELECT: SelectFieldConfig,
    FieldType.RADIO: RadioFieldConfig,
    FieldType.CHECKBOX: CheckboxFieldConfig,
    FieldType.DATE: BaseFieldConfig,
    FieldType.FILE: FileFieldConfig,
    FieldType.SWITCH: BaseFieldConfig,
    FieldType.RATING: RatingFieldConfig,
    FieldType.RANGE: RangeFieldConfig,
    FieldType.HIDDEN: HiddenFieldConfig,
    FieldType.SECTION: SectionFieldConfig,
    FieldType.CONDITIONAL: BaseFieldConfig,
}

# Field types that never carry an answer and are never validated.
VALUELESS_TYPES = frozenset({FieldType.SECTION, FieldType.HIDDEN})


def config_class_for(field_type: FieldType | str) -> type[SchemaModel]:
    return CONFIG_TYPES[FieldType(field_type)]


class FieldSchema(SchemaModel):
    id: str
    type: FieldType
    label: str
    config: FieldConfig
    conditions: Optional[FieldConditions] = None
    order: int = 0

    @model_validator(mode="before")
    @classmethod
    def select_config_variant(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        try:
            config_cls = config_class_for(data.get("type"))
        except ValueError:
            return data

        config = data.get("config")
        if config is None:
            config = {}
        if isinstance(config, BaseModel):
            if type(config) is config_cls:
                return data
            # The field changed type: carry over the knobs both variants share.
            config = config.model_dump(by_alias=True, exclude_none=True)
        return {**data, "config": config_cls.model_validate(config)}

    @model_validator(mode="after")
    def check_config_variant(self) -> "FieldSchema":
        expected = CONFIG_TYPES[self.type]
        if type(self.config) is not expected:
            raise ValueError(
                f"Field {self.id} of type {self.type.value} requires "
                f"{expected.__name__}, got {type(self.config).__name__}"
            )
        return self

    @property
    def is_required(self) -> bool:
        if self.type in VALUELESS_TYPES:
            return False
        return self.config.required

    @property
    def validation_rules(self) -> list[ValidationRule]:
        if self.type in VALUELESS_TYPES:
            return []
        return self.config.validation


class FormMetadata(SchemaModel):
    title: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubmitButton(SchemaModel):
    text: str
    enabled: bool = True


class FormSettings(SchemaModel):
    submit_button: SubmitButton
    success_message: str
    redirect_url: Optional[str] = None


class FormSchema(SchemaModel):
    version: str
    id: str
    metadata: FormMetadata
    fields: list[FieldSchema] = Field(default_factory=list)
    settings: FormSettings

    @model_validator(mode="after")
    def check_unique_field_ids(self) -> "FormSchema":
        seen: set[str] = set()
        for field in self.fields:
            if field.id in seen:
                raise ValueError(f"Duplicate field id: {field.id}")
            seen.add(field.id)
        return self

    def get_field(self, field_id: str) -> Optional[FieldSchema]:
        return next((f for f in self.fields if f.id == field_id), None)

    def index_of(self, field_id: str) -> int:
        """Index of the field with ``field_id``, or -1 when absent."""
        for index, field in enumerate(self.fields):
            if field.id == field_id:
                return index
        return -1

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted (camelCase JSON) document shape."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class FileUpload(SchemaModel):
    """A file handle submitted as an answer to a file field."""

    name: str
    type: str = ""
    size: int = 0


class ValidationResult(SchemaModel):
    valid: bool
    error: Optional[str] = None


class FormValidationResult(SchemaModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class SavedForm(SchemaModel):
    id: str
    form: FormSchema = Field(alias="schema")
    saved_at: datetime
