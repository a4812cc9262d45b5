"""Rule evaluation for conditional form logic.

A rule list is evaluated against the current form values and reduces to a
single boolean. Rules are plain dicts in the JSON shape stored on form
templates::

    {'field': 'age', 'operator': 'greater_than', 'value': 18}
    {'field': '', 'operator': 'equals', 'logic': 'or', 'rules': [...]}

The first form is a leaf rule. The second is a group: its nested ``rules``
are evaluated recursively and combined by ``logic``; the group's own
``field`` and ``operator`` are not evaluated.

Combination of a rule list is asymmetric. Top-level leaf results are ANDed.
Groups only influence the outcome by short-circuiting: an ``and`` group
whose nested result is false forces ``False``, an ``or`` group whose nested
result is true forces ``True``. A group that does not short-circuit is
evaluated and its result discarded, so ``[leaf_true, or_group_false]`` is
``True`` and a list made only of non-short-circuiting groups is ``True``.
This is a known quirk of the stored template format and is preserved.
"""

import enum
import logging
import operator as op

from .enums import Logic, Operator
from .values import ABSENT, is_empty, lookup, strict_equals, to_number, to_text

logger = logging.getLogger(__name__)


def _contains(actual, expected):
    if isinstance(actual, (list, tuple)):
        return any(strict_equals(item, expected) for item in actual)
    if isinstance(actual, str):
        return to_text(expected).lower() in actual.lower()
    return False


def _numeric(compare):
    return lambda actual, expected: compare(to_number(actual), to_number(expected))


# Operator dispatch for leaf rules: (field value, rule value) -> bool
OPERATORS = {
    Operator.EQUALS.value: strict_equals,
    Operator.NOT_EQUALS.value: lambda actual, expected: not strict_equals(actual, expected),
    Operator.CONTAINS.value: _contains,
    Operator.GREATER_THAN.value: _numeric(op.gt),
    Operator.LESS_THAN.value: _numeric(op.lt),
    Operator.IS_EMPTY.value: lambda actual, expected: is_empty(actual),
    Operator.IS_NOT_EMPTY.value: lambda actual, expected: not is_empty(actual),
}


def normalize_key(key):
    """Return the plain string for an enum member, or the key unchanged."""
    if isinstance(key, enum.Enum):
        return key.value
    return key


def is_group(rule) -> bool:
    """A rule is a group when it carries a nested ``rules`` list."""
    return rule.get('rules') is not None


def evaluate_rule(rule, values) -> bool:
    """Evaluate a single leaf rule against the form values.

    Unknown operators evaluate to False.
    """
    operator_name = normalize_key(rule.get('operator'))
    op_func = OPERATORS.get(operator_name) if isinstance(operator_name, str) else None
    if op_func is None:
        logger.warning(f"Unknown operator '{operator_name}' in conditional rule for field '{rule.get('field')}'")
        return False

    actual = lookup(values, rule.get('field'))
    expected = rule.get('value', ABSENT)
    return bool(op_func(actual, expected))


def evaluate_rules(rules, values) -> bool:
    """Evaluate a rule list against the form values.

    Args:
        rules (list): Leaf and group rule dicts. ``None`` or an empty list
            passes unconditionally.
        values (dict): Current form values keyed by field name.

    Returns:
        bool: The combined result, see the module docstring for the
            combination policy.
    """
    if not rules:
        return True

    if len(rules) == 1 and not is_group(rules[0]):
        return evaluate_rule(rules[0], values)

    leaf_results = [evaluate_rule(rule, values) for rule in rules if not is_group(rule)]

    for rule in rules:
        if not is_group(rule):
            continue
        nested_result = evaluate_rules(rule['rules'], values)
        logic = normalize_key(rule.get('logic')) or Logic.AND.value

        if logic == Logic.AND.value:
            if not nested_result:
                return False
        elif nested_result:
            # Any logic other than exactly "and" combines as "or", including "AND"
            return True

    return all(leaf_results)
