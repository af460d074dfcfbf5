"""Enumeration type definitions"""

from enum import Enum


class FieldType(str, Enum):
    """Field types available in the palette"""

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"
    FILE = "file"
    SWITCH = "switch"
    RATING = "rating"
    RANGE = "range"
    HIDDEN = "hidden"
    SECTION = "section"
    CONDITIONAL = "conditional"


class FieldCategory(str, Enum):
    INPUT = "input"
    CHOICE = "choice"
    LAYOUT = "layout"
    SPECIAL = "special"


class ConditionOperator(str, Enum):
    """Comparison operators usable in conditional visibility rules"""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"


class LogicOperator(str, Enum):
    AND = "AND"
    OR = "OR"


class ValidationType(str, Enum):
    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MIN = "min"
    MAX = "max"
    PATTERN = "pattern"
    EMAIL = "email"
    URL = "url"
    CUSTOM = "custom"


class BuilderMode(str, Enum):
    BUILDER = "builder"
    PREVIEW = "preview"


class StorageType(str, Enum):
    FILE = "file"
    DB = "db"
