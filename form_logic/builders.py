"""Helpers for building rule and condition dicts in code.

Form templates are normally authored in the form builder and stored as JSON;
these helpers produce the same shapes for templates defined in Python, such
as seed data and tests.
"""

from .enums import Action, Logic, Operator
from .rules import normalize_key
from .values import ABSENT


def create_rule(field, operator, value=ABSENT):
    """Build a leaf rule. ``value`` is omitted when not given."""
    rule = {'field': field, 'operator': normalize_key(operator)}
    if value is not ABSENT:
        rule['value'] = value
    return rule


def _group(logic, rules):
    return {
        'field': '',
        'operator': Operator.EQUALS.value,
        'rules': list(rules),
        'logic': logic.value,
    }


def create_and_condition(*rules):
    """Build a group rule whose nested rules must all hold."""
    return _group(Logic.AND, rules)


def create_or_condition(*rules):
    """Build a group rule where one nested rule holding is enough."""
    return _group(Logic.OR, rules)


def create_condition(target_field, action, rules):
    return {'id': target_field, 'action': normalize_key(action), 'rules': list(rules)}


def when_field_equals(field, value, target_field):
    return create_condition(target_field, Action.SHOW, [create_rule(field, Operator.EQUALS, value)])


def when_field_not_equals(field, value, target_field):
    # Hidden while the field equals the value
    return create_condition(target_field, Action.HIDE, [create_rule(field, Operator.EQUALS, value)])


def when_field_is_empty(field, target_field):
    return create_condition(target_field, Action.HIDE, [create_rule(field, Operator.IS_EMPTY)])


def when_field_is_not_empty(field, target_field):
    return create_condition(target_field, Action.SHOW, [create_rule(field, Operator.IS_NOT_EMPTY)])


def when_field_contains(field, value, target_field):
    return create_condition(target_field, Action.SHOW, [create_rule(field, Operator.CONTAINS, value)])


def when_field_greater_than(field, value, target_field):
    return create_condition(target_field, Action.SHOW, [create_rule(field, Operator.GREATER_THAN, value)])


def when_field_less_than(field, value, target_field):
    return create_condition(target_field, Action.SHOW, [create_rule(field, Operator.LESS_THAN, value)])


def when_all_conditions_met(rules, target_field):
    return create_condition(target_field, Action.SHOW, [create_and_condition(*rules)])


def when_any_condition_met(rules, target_field):
    return create_condition(target_field, Action.SHOW, [create_or_condition(*rules)])


# Preset catalogue for the form builder's "common conditions" picker
common_conditions = {
    'when_field_equals': when_field_equals,
    'when_field_not_equals': when_field_not_equals,
    'when_field_is_empty': when_field_is_empty,
    'when_field_is_not_empty': when_field_is_not_empty,
    'when_field_contains': when_field_contains,
    'when_field_greater_than': when_field_greater_than,
    'when_field_less_than': when_field_less_than,
    'when_all_conditions_met': when_all_conditions_met,
    'when_any_condition_met': when_any_condition_met,
}
