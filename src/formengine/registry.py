"""Field type catalog.

Static lookup from field type to palette category, display label and the
default configuration new field instances start from.
"""

import logging
from dataclasses import dataclass

from .enums import FieldCategory, FieldType, ValidationType
from .errors import UnknownFieldTypeError
from .form_schema import (
    BaseFieldConfig,
    CheckboxFieldConfig,
    FieldOption,
    FileFieldConfig,
    HiddenFieldConfig,
    NumberFieldConfig,
    RadioFieldConfig,
    RangeFieldConfig,
    RatingFieldConfig,
    SchemaModel,
    SectionFieldConfig,
    SelectFieldConfig,
    TextFieldConfig,
    ValidationRule,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDefinition:
    type: FieldType
    category: FieldCategory
    icon: str
    label: str
    description: str
    default_config: SchemaModel


def _default_options() -> list[FieldOption]:
    return [
        FieldOption(label="Option 1", value="option1"),
        FieldOption(label="Option 2", value="option2"),
        FieldOption(label="Option 3", value="option3"),
    ]


FIELD_REGISTRY: dict[FieldType, FieldDefinition] = {
    FieldType.TEXT: FieldDefinition(
        type=FieldType.TEXT,
        category=FieldCategory.INPUT,
        icon="📝",
        label="Text Input",
        description="Single line text input",
        default_config=TextFieldConfig(placeholder="Enter text...", default_value=""),
    ),
    FieldType.EMAIL: FieldDefinition(
        type=FieldType.EMAIL,
        category=FieldCategory.INPUT,
        icon="📧",
        label="Email",
        description="Email address input with validation",
        default_config=TextFieldConfig(
            placeholder="email@example.com",
            default_value="",
            validation=[
                ValidationRule(
                    kind=ValidationType.EMAIL,
                    message="Please enter a valid email address",
                )
            ],
        ),
    ),
    FieldType.PASSWORD: FieldDefinition(
        type=FieldType.PASSWORD,
        category=FieldCategory.INPUT,
        icon="🔒",
        label="Password",
        description="Password input field",
        default_config=TextFieldConfig(placeholder="Enter password...", default_value=""),
    ),
    FieldType.NUMBER: FieldDefinition(
        type=FieldType.NUMBER,
        category=FieldCategory.INPUT,
        icon="🔢",
        label="Number",
        description="Numeric input with min/max validation",
        default_config=NumberFieldConfig(placeholder="Enter number..."),
    ),
    FieldType.TEXTAREA: FieldDefinition(
        type=FieldType.TEXTAREA,
        category=FieldCategory.INPUT,
        icon="📄",
        label="Textarea",
        description="Multi-line text input",
        default_config=TextFieldConfig(placeholder="Enter text...", default_value=""),
    ),
    FieldType.SELECT: FieldDefinition(
        type=FieldType.SELECT,
        category=FieldCategory.CHOICE,
        icon="📋",
        label="Dropdown",
        description="Select from a list of options",
        default_config=SelectFieldConfig(
            placeholder="Select an option...", options=_default_options()
        ),
    ),
    FieldType.RADIO: FieldDefinition(
        type=FieldType.RADIO,
        category=FieldCategory.CHOICE,
        icon="🔘",
        label="Radio Group",
        description="Choose one option from a list",
        default_config=RadioFieldConfig(options=_default_options(), inline=False),
    ),
    FieldType.CHECKBOX: FieldDefinition(
        type=FieldType.CHECKBOX,
        category=FieldCategory.CHOICE,
        icon="☑️",
        label="Checkbox Group",
        description="Choose multiple options",
        default_config=CheckboxFieldConfig(options=_default_options(), inline=False),
    ),
    FieldType.DATE: FieldDefinition(
        type=FieldType.DATE,
        category=FieldCategory.INPUT,
        icon="📅",
        label="Date Picker",
        description="Select a date",
        default_config=BaseFieldConfig(default_value=""),
    ),
    FieldType.FILE: FieldDefinition(
        type=FieldType.FILE,
        category=FieldCategory.INPUT,
        icon="📎",
        label="File Upload",
        description="Upload one or more files",
        default_config=FileFieldConfig(multiple=False, max_size=5 * 1024 * 1024),
    ),
    FieldType.SWITCH: FieldDefinition(
        type=FieldType.SWITCH,
        category=FieldCategory.INPUT,
        icon="🔄",
        label="Switch/Toggle",
        description="On/off toggle switch",
        default_config=BaseFieldConfig(default_value=False),
    ),
    FieldType.RATING: FieldDefinition(
        type=FieldType.RATING,
        category=FieldCategory.INPUT,
        icon="⭐",
        label="Rating",
        description="Star rating input",
        default_config=RatingFieldConfig(max_rating=5, icon="star"),
    ),
    FieldType.RANGE: FieldDefinition(
        type=FieldType.RANGE,
        category=FieldCategory.INPUT,
        icon="📊",
        label="Range Slider",
        description="Select a value from a range",
        default_config=RangeFieldConfig(min=0, max=100, step=1, show_value=True),
    ),
    FieldType.HIDDEN: FieldDefinition(
        type=FieldType.HIDDEN,
        category=FieldCategory.SPECIAL,
        icon="👁️",
        label="Hidden Field",
        description="Hidden input for tracking data",
        default_config=HiddenFieldConfig(default_value=""),
    ),
    FieldType.SECTION: FieldDefinition(
        type=FieldType.SECTION,
        category=FieldCategory.LAYOUT,
        icon="📏",
        label="Section",
        description="Visual divider with optional heading",
        default_config=SectionFieldConfig(
            heading="Section Heading", description="", divider=True
        ),
    ),
    FieldType.CONDITIONAL: FieldDefinition(
        type=FieldType.CONDITIONAL,
        category=FieldCategory.SPECIAL,
        icon="🔀",
        label="Conditional Field",
        description="Field with visibility conditions",
        default_config=BaseFieldConfig(),
    ),
}


def get_field_definition(field_type: FieldType | str) -> FieldDefinition:
    """Look up the catalog entry for a field type.

    Raises:
        UnknownFieldTypeError: the type is not a known field type or the
            catalog lacks an entry for it
    """
    try:
        return FIELD_REGISTRY[FieldType(field_type)]
    except (KeyError, ValueError) as e:
        logger.error(f"No field definition for type: {field_type}")
        raise UnknownFieldTypeError(f"Unknown field type: {field_type}") from e


def get_fields_by_category(category: FieldCategory | str) -> list[FieldDefinition]:
    category = FieldCategory(category)
    return [d for d in FIELD_REGISTRY.values() if d.category == category]


def get_all_categories() -> list[FieldCategory]:
    categories: list[FieldCategory] = []
    for definition in FIELD_REGISTRY.values():
        if definition.category not in categories:
            categories.append(definition.category)
    return categories
