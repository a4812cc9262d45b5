"""Tests for rule evaluation."""
import logging
import pytest
from form_logic.builders import create_and_condition, create_or_condition, create_rule
from form_logic.enums import Operator
from form_logic.rules import OPERATORS, evaluate_rule, evaluate_rules, is_group


def leaf(field, operator, value=None):
    rule = {'field': field, 'operator': operator}
    if value is not None:
        rule['value'] = value
    return rule


TRUE_LEAF = leaf('flag', 'equals', 'on')
FALSE_LEAF = leaf('flag', 'equals', 'off')
VALUES = {'flag': 'on'}


class TestEmptyRules:
    """A rule list without rules always passes."""

    @pytest.mark.parametrize('values', [{}, {'a': 1}, {'a': None, 'b': [1, 2]}, None])
    def test_empty_list(self, values):
        assert evaluate_rules([], values) is True

    def test_none_rules(self):
        assert evaluate_rules(None, {'a': 1}) is True


class TestOperators:
    """Test each leaf operator."""

    def test_operator_table_covers_enum(self):
        assert set(OPERATORS) == {o.value for o in Operator}

    def test_equals_is_strict(self):
        assert evaluate_rule(leaf('q', 'equals', 'yes'), {'q': 'yes'}) is True
        assert evaluate_rule(leaf('q', 'equals', 'yes'), {'q': 'Yes'}) is False
        assert evaluate_rule(leaf('q', 'equals', 1), {'q': '1'}) is False
        assert evaluate_rule(leaf('q', 'equals', True), {'q': 1}) is False

    def test_equals_without_value_matches_missing_field(self):
        rule = create_rule('q', Operator.EQUALS)
        assert evaluate_rule(rule, {}) is True
        assert evaluate_rule(rule, {'q': None}) is False

    def test_not_equals(self):
        assert evaluate_rule(leaf('country', 'not_equals', 'US'), {'country': 'CA'}) is True
        assert evaluate_rule(leaf('country', 'not_equals', 'US'), {'country': 'US'}) is False
        assert evaluate_rule(leaf('country', 'not_equals', 'US'), {}) is True

    def test_contains_text_case_insensitive(self):
        assert evaluate_rule(leaf('title', 'contains', 'hello'), {'title': 'Hello World'}) is True
        assert evaluate_rule(leaf('title', 'contains', 'WORLD'), {'title': 'Hello World'}) is True
        assert evaluate_rule(leaf('title', 'contains', 'bye'), {'title': 'Hello World'}) is False

    def test_contains_text_uses_text_form_of_value(self):
        assert evaluate_rule(leaf('code', 'contains', 12), {'code': 'A-123'}) is True
        assert evaluate_rule(leaf('flag', 'contains', True), {'flag': 'is TRUE'}) is True

    def test_contains_list_uses_strict_equality(self):
        assert evaluate_rule(leaf('tags', 'contains', 'hvac'), {'tags': ['roof', 'hvac']}) is True
        assert evaluate_rule(leaf('tags', 'contains', 'HVAC'), {'tags': ['roof', 'hvac']}) is False
        assert evaluate_rule(leaf('ids', 'contains', 1), {'ids': ['1', '2']}) is False
        assert evaluate_rule(leaf('ids', 'contains', 2), {'ids': [1, 2]}) is True

    def test_contains_other_kinds(self):
        assert evaluate_rule(leaf('n', 'contains', 1), {'n': 123}) is False
        assert evaluate_rule(leaf('n', 'contains', 'x'), {}) is False
        assert evaluate_rule(leaf('n', 'contains', 'x'), {'n': None}) is False

    def test_greater_than_coerces_text(self):
        assert evaluate_rule(leaf('reading', 'greater_than', 5), {'reading': '10'}) is True
        assert evaluate_rule(leaf('reading', 'greater_than', 5), {'reading': 'abc'}) is False
        assert evaluate_rule(leaf('reading', 'greater_than', '5'), {'reading': 6}) is True
        assert evaluate_rule(leaf('reading', 'greater_than', 5), {'reading': 5}) is False

    def test_less_than(self):
        assert evaluate_rule(leaf('age', 'less_than', 18), {'age': 15}) is True
        assert evaluate_rule(leaf('age', 'less_than', 18), {'age': 25}) is False
        assert evaluate_rule(leaf('age', 'less_than', 18), {}) is False
        assert evaluate_rule(leaf('age', 'less_than', 'n/a'), {'age': 1}) is False

    def test_null_reads_as_zero(self):
        assert evaluate_rule(leaf('count', 'less_than', 1), {'count': None}) is True

    @pytest.mark.parametrize('value', [None, '', [], [1], 0, 'x', False])
    def test_is_empty_complements_is_not_empty(self, value):
        values = {'f': value}
        empty = evaluate_rule(leaf('f', 'is_empty'), values)
        not_empty = evaluate_rule(leaf('f', 'is_not_empty'), values)
        assert empty is (not not_empty)

    def test_is_empty_missing_field(self):
        assert evaluate_rule(leaf('f', 'is_empty'), {}) is True
        assert evaluate_rule(leaf('f', 'is_not_empty'), {}) is False

    def test_is_empty_ignores_rule_value(self):
        assert evaluate_rule(leaf('f', 'is_empty', 'anything'), {'f': ''}) is True

    def test_unknown_operator_fails_closed(self, caplog):
        with caplog.at_level(logging.WARNING, logger='form_logic.rules'):
            assert evaluate_rule(leaf('f', 'starts_with', 'a'), {'f': 'abc'}) is False
        assert "Unknown operator 'starts_with'" in caplog.text

    def test_missing_operator_fails_closed(self):
        assert evaluate_rule({'field': 'f', 'value': 1}, {'f': 1}) is False

    def test_enum_operator(self):
        rule = {'field': 'f', 'operator': Operator.GREATER_THAN, 'value': 1}
        assert evaluate_rule(rule, {'f': 2}) is True


class TestCombination:
    """Test how leaf and group results combine."""

    def test_single_leaf_passthrough(self):
        rule = leaf('age', 'greater_than', 18)
        for values in ({'age': 21}, {'age': 10}, {}):
            assert evaluate_rules([rule], values) is evaluate_rule(rule, values)

    def test_scenario_age_greater_than(self):
        rules = [{'field': 'age', 'operator': 'greater_than', 'value': 18}]
        assert evaluate_rules(rules, {'age': 21}) is True

    def test_two_leaves_are_anded(self):
        rules = [
            {'field': 'type', 'operator': 'equals', 'value': 'import'},
            {'field': 'country', 'operator': 'not_equals', 'value': 'US'},
        ]
        assert evaluate_rules(rules, {'type': 'import', 'country': 'CA'}) is True
        assert evaluate_rules(rules, {'type': 'import', 'country': 'US'}) is False
        assert evaluate_rules(rules, {'type': 'export', 'country': 'CA'}) is False
        assert evaluate_rules(rules, {'type': 'export', 'country': 'US'}) is False

    def test_and_group_false_short_circuits(self):
        rules = [TRUE_LEAF, create_and_condition(TRUE_LEAF, FALSE_LEAF)]
        assert evaluate_rules(rules, VALUES) is False

    def test_and_group_true_defers_to_leaves(self):
        assert evaluate_rules([TRUE_LEAF, create_and_condition(TRUE_LEAF)], VALUES) is True
        assert evaluate_rules([FALSE_LEAF, create_and_condition(TRUE_LEAF)], VALUES) is False

    def test_or_group_true_short_circuits_over_false_leaves(self):
        rules = [FALSE_LEAF, create_or_condition(TRUE_LEAF)]
        assert evaluate_rules(rules, VALUES) is True

    def test_or_group_false_is_discarded(self):
        # The group result is computed but does not feed the final AND
        rules = [TRUE_LEAF, create_or_condition(FALSE_LEAF)]
        assert evaluate_rules(rules, VALUES) is True

    def test_only_groups_without_short_circuit_pass(self):
        assert evaluate_rules([create_or_condition(FALSE_LEAF)], VALUES) is True
        assert evaluate_rules([create_and_condition(TRUE_LEAF)], VALUES) is True
        assert evaluate_rules([create_and_condition(FALSE_LEAF)], VALUES) is False

    def test_first_short_circuiting_group_wins(self):
        rules = [create_or_condition(TRUE_LEAF), create_and_condition(FALSE_LEAF)]
        assert evaluate_rules(rules, VALUES) is True
        rules = [create_and_condition(FALSE_LEAF), create_or_condition(TRUE_LEAF)]
        assert evaluate_rules(rules, VALUES) is False

    def test_group_defaults_to_and(self):
        group = {'field': '', 'operator': 'equals', 'rules': [TRUE_LEAF, FALSE_LEAF]}
        assert evaluate_rules([TRUE_LEAF, group], VALUES) is False

    def test_logic_keyword_is_case_sensitive(self):
        # Only lowercase "and" is an and group; "AND" combines as or
        upper = {'field': '', 'operator': 'equals', 'rules': [FALSE_LEAF], 'logic': 'AND'}
        lower = dict(upper, logic='and')
        assert evaluate_rules([TRUE_LEAF, lower], VALUES) is False
        assert evaluate_rules([TRUE_LEAF, upper], VALUES) is True
        upper['rules'] = [TRUE_LEAF]
        assert evaluate_rules([FALSE_LEAF, upper], VALUES) is True

    def test_group_own_field_is_not_evaluated(self):
        group = {'field': 'flag', 'operator': 'equals', 'value': 'off', 'rules': [TRUE_LEAF], 'logic': 'and'}
        assert evaluate_rules([TRUE_LEAF, group], VALUES) is True

    def test_nested_groups(self):
        inner = create_and_condition(TRUE_LEAF, FALSE_LEAF)
        outer = create_and_condition(TRUE_LEAF, inner)
        assert evaluate_rules([TRUE_LEAF, outer], VALUES) is False

    def test_empty_group_is_vacuously_true(self):
        group = {'field': '', 'operator': 'equals', 'rules': [], 'logic': 'or'}
        assert is_group(group)
        assert evaluate_rules([group], VALUES) is True

    def test_deterministic(self):
        rules = [TRUE_LEAF, create_or_condition(FALSE_LEAF, TRUE_LEAF), leaf('n', 'less_than', 3)]
        values = {'flag': 'on', 'n': '2'}
        results = {evaluate_rules(rules, values) for _ in range(5)}
        assert results == {True}
        assert values == {'flag': 'on', 'n': '2'}
