"""Condition evaluation and per-field state resolution.

A condition binds a rule list to one action on one target field::

    {'id': 'guardian', 'action': 'show',
     'rules': [{'field': 'age', 'operator': 'less_than', 'value': 18}]}

The resolvers answer one question each for a field (visible, enabled,
required) from the full condition list of a form. Within a resolver the
negating action takes precedence: if any ``hide`` condition targets a field,
``show`` conditions for that field are not consulted. Required is the
exception, where ``require`` takes precedence over ``optional``.
"""

from .enums import Action, NEGATING_ACTIONS
from .rules import evaluate_rules, normalize_key


def evaluate_condition(condition, values) -> bool:
    """Evaluate a condition's rules and apply its action.

    ``show``, ``enable`` and ``require`` return the rule result, ``hide``,
    ``disable`` and ``optional`` return its negation. Unrecognized actions
    return the rule result.
    """
    result = evaluate_rules(condition.get('rules'), values)
    if normalize_key(condition.get('action')) in NEGATING_ACTIONS:
        return not result
    return result


def _conditions_for(field_id, conditions):
    return [c for c in conditions or [] if c.get('id') == field_id]


def _with_action(field_conditions, action):
    return [c for c in field_conditions if normalize_key(c.get('action')) == action.value]


def _any_rules_pass(field_conditions, values):
    return any(evaluate_rules(c.get('rules'), values) for c in field_conditions)


def get_field_visibility(field_id, values, conditions) -> bool:
    """Whether ``field_id`` is visible; fields without conditions are visible."""
    field_conditions = _conditions_for(field_id, conditions)
    if not field_conditions:
        return True

    hide_conditions = _with_action(field_conditions, Action.HIDE)
    if hide_conditions:
        return not _any_rules_pass(hide_conditions, values)

    show_conditions = _with_action(field_conditions, Action.SHOW)
    if show_conditions:
        return _any_rules_pass(show_conditions, values)

    return True


def get_field_enabled(field_id, values, conditions) -> bool:
    """Whether ``field_id`` is enabled; fields without conditions are enabled."""
    field_conditions = _conditions_for(field_id, conditions)
    if not field_conditions:
        return True

    disable_conditions = _with_action(field_conditions, Action.DISABLE)
    if disable_conditions:
        return not _any_rules_pass(disable_conditions, values)

    enable_conditions = _with_action(field_conditions, Action.ENABLE)
    if enable_conditions:
        return _any_rules_pass(enable_conditions, values)

    return True


def get_field_required(field_id, values, conditions) -> bool:
    """Whether conditions make ``field_id`` required.

    Defaults to False: this only adds to the field's static required flag,
    which the caller combines separately.
    """
    field_conditions = _conditions_for(field_id, conditions)
    if not field_conditions:
        return False

    require_conditions = _with_action(field_conditions, Action.REQUIRE)
    if require_conditions:
        return _any_rules_pass(require_conditions, values)

    optional_conditions = _with_action(field_conditions, Action.OPTIONAL)
    if optional_conditions:
        return not _any_rules_pass(optional_conditions, values)

    return False


class ConditionalLogic:
    """Stateless evaluator handed to form consumers.

    Construct once and pass it to whatever needs to evaluate conditions,
    e.g. :class:`form_logic.form_state.FormEvaluator`. Every method is a pure
    function of its arguments, so one instance can be shared freely.
    """

    def evaluate_rules(self, rules, values):
        return evaluate_rules(rules, values)

    def evaluate_condition(self, condition, values):
        return evaluate_condition(condition, values)

    def get_field_visibility(self, field_id, values, conditions):
        return get_field_visibility(field_id, values, conditions)

    def get_field_enabled(self, field_id, values, conditions):
        return get_field_enabled(field_id, values, conditions)

    def get_field_required(self, field_id, values, conditions):
        return get_field_required(field_id, values, conditions)

    def __repr__(self):
        return f"{type(self).__name__}()"
