"""Whole-form evaluation of conditional logic for a form template."""
import logging
import math
import re
from dataclasses import dataclass, asdict

from .builders import create_condition
from .enums import Action
from .values import is_empty, lookup, to_number, to_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldState:
    """Resolved state of one form field for a set of values."""
    key: str
    visible: bool = True
    enabled: bool = True
    required: bool = False

    def as_dict(self):
        return asdict(self)


def build_value_lookup(responses):
    """Build a field -> value dictionary from submission response rows.

    Pre-compute this once when a submission is opened and reuse it across
    evaluations. Rows without a field name are skipped; later rows for the
    same field win.

    Args:
        responses (list): Response dicts with 'field' and 'answer' keys

    Returns:
        dict: Dictionary mapping field -> answer value
    """
    value_lookup = {}
    for r in responses or []:
        field = r.get('field')
        if field is not None:
            value_lookup[field] = r.get('answer')
    return value_lookup


class FormEvaluator:
    """Evaluates every field of a form template against current values.

    Args:
        logic (ConditionalLogic): The evaluator to resolve field states with.
        template (FormTemplateSchema): Validated template, see
            :func:`form_logic.schemas.load_template`.
    """

    def __init__(self, logic, template):
        self.logic = logic
        self.template = template
        self.fields = sorted(template.fields, key=lambda f: f.order)
        self.conditions = template.condition_dicts()

        # A field's single-rule shortcut shows the field while the rule holds
        for field in self.fields:
            if field.conditional is not None:
                self.conditions.append(
                    create_condition(field.key, Action.SHOW, [field.conditional.to_dict()])
                )

        unknown = template.unknown_targets()
        if unknown:
            logger.warning(f"Template '{template.name}' has conditions for unknown fields: {', '.join(unknown)}")

    def field_state(self, key, values):
        """Resolve visibility, enablement and requirement for one field."""
        field = self.template.get_field(key)
        if field is None:
            raise KeyError(f"Unknown field '{key}' in template '{self.template.name}'")

        visible = self.logic.get_field_visibility(key, values, self.conditions)
        enabled = self.logic.get_field_enabled(key, values, self.conditions) and not field.readonly
        # Hidden fields are never required
        required = visible and (field.required or self.logic.get_field_required(key, values, self.conditions))
        return FieldState(key=key, visible=visible, enabled=enabled, required=required)

    def evaluate(self, values):
        """Resolve every field in template order.

        Returns:
            dict: field key -> FieldState, ordered by field ``order``
        """
        return {field.key: self.field_state(field.key, values) for field in self.fields}

    def visible_fields(self, values):
        return [key for key, state in self.evaluate(values).items() if state.visible]

    def required_fields(self, values):
        return [key for key, state in self.evaluate(values).items() if state.required]

    def missing_required(self, values):
        """Keys of visible required fields that have no value yet."""
        return [key for key in self.required_fields(values) if is_empty(lookup(values, key))]

    def validation_errors(self, values):
        """Check visible, non-empty values against each field's ``validation``.

        Numeric bounds compare the value read as a number; length and
        ``pattern`` checks use its text form. A field's ``message`` replaces
        the default wording of every check it fails.

        Returns:
            dict: field key -> list of messages, only for fields that fail
        """
        errors = {}
        for key in self.visible_fields(values):
            rules = self.template.get_field(key).validation
            value = lookup(values, key)
            if rules is None or is_empty(value):
                continue
            messages = _check_value(value, rules)
            if messages:
                if rules.message:
                    messages = [rules.message]
                errors[key] = messages
        if errors:
            logger.debug(f"Validation failed for fields: {', '.join(errors)}")
        return errors


def _check_value(value, rules):
    messages = []
    if rules.min is not None or rules.max is not None:
        number = to_number(value)
        if math.isnan(number):
            messages.append('Must be a valid number')
        else:
            if rules.min is not None and number < rules.min:
                messages.append(f"Minimum value is {to_text(rules.min)}")
            if rules.max is not None and number > rules.max:
                messages.append(f"Maximum value is {to_text(rules.max)}")

    text = to_text(value)
    if rules.min_length is not None and len(text) < rules.min_length:
        messages.append(f"Minimum {rules.min_length} characters required")
    if rules.max_length is not None and len(text) > rules.max_length:
        messages.append(f"Maximum {rules.max_length} characters allowed")
    if rules.pattern and not re.search(rules.pattern, text):
        messages.append('Invalid format')
    return messages
