"""Conditional field logic for maintenance forms.

This package decides, for each field of a dynamic form, whether it is
visible, enabled and required given the values entered so far. It includes:

- Values (values.py) - The field value model: absent marker, emptiness, equality and coercion
- Rules (rules.py) - Operator dispatch and rule list evaluation
- Conditions (conditions.py) - Condition actions, field-state resolvers and the ConditionalLogic evaluator
- Builders (builders.py) - Rule, group and preset condition constructors
- Schemas (schemas.py) - Pydantic validation and JSON loading for conditions and form templates
- Form state (form_state.py) - Evaluation of every field of a template at once

Evaluation is pure: the same rules and values always give the same result,
and nothing is cached between calls.
"""
from .conditions import (
    ConditionalLogic,
    evaluate_condition,
    get_field_enabled,
    get_field_required,
    get_field_visibility,
)
from .enums import Action, Logic, Operator
from .rules import evaluate_rule, evaluate_rules
from .values import ABSENT

__all__ = [
    'ABSENT',
    'Action',
    'ConditionalLogic',
    'Logic',
    'Operator',
    'evaluate_condition',
    'evaluate_rule',
    'evaluate_rules',
    'get_field_enabled',
    'get_field_required',
    'get_field_visibility',
]
