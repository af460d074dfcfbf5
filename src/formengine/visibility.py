"""Conditional visibility evaluation.

Operators are a fixed set with exact semantics: equality is strict (no
coercion between strings, numbers and booleans), ordering comparisons
only apply to numbers, and ``contains``/``notContains`` fall back to
``False``/``True`` when the operand types do not support the test.
"""

import logging
from typing import Any, Optional, Sequence

from .enums import ConditionOperator, LogicOperator
from .form_schema import FieldSchema, FormData
from .utils import is_empty, is_number

logger = logging.getLogger(__name__)


def strict_equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _contains(field_value: Any, compare_value: Any) -> Optional[bool]:
    """Membership test, or None when the operand types do not apply."""
    if isinstance(field_value, str) and isinstance(compare_value, str):
        return compare_value in field_value
    if isinstance(field_value, (list, tuple)):
        return any(strict_equals(item, compare_value) for item in field_value)
    return None


def evaluate_condition(
    operator: ConditionOperator | str, field_value: Any, compare_value: Any
) -> bool:
    operator = ConditionOperator(operator)

    if operator == ConditionOperator.EQUALS:
        return strict_equals(field_value, compare_value)
    if operator == ConditionOperator.NOT_EQUALS:
        return not strict_equals(field_value, compare_value)

    if operator == ConditionOperator.CONTAINS:
        result = _contains(field_value, compare_value)
        return False if result is None else result
    if operator == ConditionOperator.NOT_CONTAINS:
        result = _contains(field_value, compare_value)
        return True if result is None else not result

    if operator == ConditionOperator.IS_EMPTY:
        return is_empty(field_value)
    if operator == ConditionOperator.IS_NOT_EMPTY:
        return not is_empty(field_value)

    if not (is_number(field_value) and is_number(compare_value)):
        return False
    if operator == ConditionOperator.GREATER_THAN:
        return field_value > compare_value
    if operator == ConditionOperator.LESS_THAN:
        return field_value < compare_value
    if operator == ConditionOperator.GREATER_THAN_OR_EQUAL:
        return field_value >= compare_value
    if operator == ConditionOperator.LESS_THAN_OR_EQUAL:
        return field_value <= compare_value

    return False


def is_visible(
    field: FieldSchema,
    form_data: FormData,
    all_fields: Optional[Sequence[FieldSchema]] = None,
) -> bool:
    """Decide whether ``field`` is active for the current answers.

    ``all_fields`` is accepted for type-aware comparisons; the current
    operators only compare raw answer values.
    """
    conditions = field.conditions
    if conditions is None:
        return True
    if not conditions.rules:
        return conditions.show

    results = [
        evaluate_condition(rule.operator, form_data.get(rule.field), rule.value)
        for rule in conditions.rules
    ]
    if conditions.logic == LogicOperator.AND:
        return all(results)
    return any(results)


def visible_fields(fields: Sequence[FieldSchema], form_data: FormData) -> list[FieldSchema]:
    """Fields a renderer shows for the current answers, in form order."""
    return [field for field in fields if is_visible(field, form_data, fields)]
