"""Pydantic schemas for validating and loading conditional form logic."""
import json
import re
import logging
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator, ConfigDict
from pydantic import ValidationError as PydanticValidationError
import bleach

from .config import ConfigManager
from .enums import Action, FieldType, Logic, Operator
from .rules import normalize_key

logger = logging.getLogger(__name__)

OPERATOR_VALUES = frozenset(o.value for o in Operator)
ACTION_VALUES = frozenset(a.value for a in Action)
LOGIC_VALUES = frozenset(l.value for l in Logic)
FIELD_TYPE_VALUES = frozenset(t.value for t in FieldType)


class ValidationError(Exception):
    """Raised when condition or template data fails validation."""
    pass


def sanitize_html(text: str) -> str:
    """Strip markup from user-authored labels and descriptions."""
    if not text:
        return text
    if '<' not in text and '>' not in text and '&' not in text:
        return text
    allowed_tags = ['p', 'br', 'strong', 'em', 'u', 'ul', 'ol', 'li']
    return bleach.clean(text, tags=allowed_tags, attributes={}, strip=True)


def _is_strict(info: ValidationInfo) -> bool:
    context = info.context or {}
    return bool(context.get('strict', False))


def _check_keyword(value, allowed, kind, info):
    value = normalize_key(value)
    if value is None or value in allowed:
        return value
    if _is_strict(info):
        raise ValueError(f"Unknown {kind} '{value}'. Must be one of: {', '.join(sorted(allowed))}")
    logger.warning(f"Unknown {kind} '{value}' accepted in lenient mode")
    return value


def rule_depth(rules) -> int:
    """Nesting depth of a rule list; a flat list of leaves has depth 1."""
    if not rules:
        return 0
    return 1 + max(rule_depth(rule.get('rules') if isinstance(rule, dict) else rule.rules) for rule in rules)


# Rule Schemas
class RuleSchema(BaseModel):
    field: str = Field(default="", max_length=100)
    operator: Optional[str] = None
    value: Any = None
    logic: Optional[str] = None
    rules: Optional[List['RuleSchema']] = None

    @field_validator('field')
    @classmethod
    def validate_field(cls, v):
        return v.strip() if v else ""

    @field_validator('operator', mode='before')
    @classmethod
    def validate_operator(cls, v, info: ValidationInfo):
        return _check_keyword(v, OPERATOR_VALUES, 'operator', info)

    @field_validator('logic', mode='before')
    @classmethod
    def validate_logic(cls, v, info: ValidationInfo):
        return _check_keyword(v, LOGIC_VALUES, 'logic', info)

    @model_validator(mode='after')
    def validate_shape(self):
        if self.rules is None:
            if not self.field:
                raise ValueError('Leaf rule requires a field')
            if self.operator is None:
                raise ValueError(f"Leaf rule for field '{self.field}' requires an operator")
        return self

    def is_group(self) -> bool:
        return self.rules is not None

    def referenced_fields(self) -> List[str]:
        """Field names read by this rule and its nested rules."""
        if self.rules is None:
            return [self.field]
        names = []
        for rule in self.rules:
            names.extend(rule.referenced_fields())
        return names

    def to_dict(self) -> Dict[str, Any]:
        # Unset keys stay out so a missing ``value`` reads as absent, not null
        return self.model_dump(exclude_unset=True)


RuleSchema.model_rebuild()


# Condition Schemas
class ConditionSchema(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    rules: List[RuleSchema] = Field(default_factory=list)
    action: str

    @field_validator('id')
    @classmethod
    def validate_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Condition target id cannot be blank')
        return v

    @field_validator('action', mode='before')
    @classmethod
    def validate_action(cls, v, info: ValidationInfo):
        return _check_keyword(v, ACTION_VALUES, 'action', info)

    @model_validator(mode='after')
    def validate_depth(self, info: ValidationInfo):
        max_depth = (info.context or {}).get('max_rule_depth')
        if max_depth is not None and rule_depth(self.rules) > max_depth:
            raise ValueError(f"Rules for '{self.id}' nest deeper than {max_depth} levels")
        return self

    def referenced_fields(self) -> List[str]:
        names = []
        for rule in self.rules:
            names.extend(rule.referenced_fields())
        return names

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'action': self.action,
            'rules': [rule.to_dict() for rule in self.rules],
        }


# Template Schemas
class FieldValidationSchema(BaseModel):
    """Value constraints the form builder attaches to a field.

    Accepts the builder's camelCase ``minLength``/``maxLength`` keys as well
    as snake_case.
    """
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = Field(default=None, ge=0, alias='minLength')
    max_length: Optional[int] = Field(default=None, ge=0, alias='maxLength')
    pattern: Optional[str] = None
    message: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('pattern')
    @classmethod
    def validate_pattern(cls, v):
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern '{v}': {e}")
        return v or None

    @model_validator(mode='after')
    def validate_bounds(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) is greater than max ({self.max})")
        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ValueError(f"minLength ({self.min_length}) is greater than maxLength ({self.max_length})")
        return self


class FormFieldSchema(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    label: str = Field(default="", max_length=500)
    description: str = Field(default="")
    field_type: str = Field(default=FieldType.TEXT.value, max_length=50)
    required: bool = Field(default=False)
    readonly: bool = Field(default=False)
    default_value: Any = None
    section: str = Field(default="", max_length=100)
    order: int = Field(default=0, ge=0)
    options: List[Dict[str, Any]] = Field(default_factory=list)
    conditional: Optional[RuleSchema] = None
    validation: Optional[FieldValidationSchema] = None

    @field_validator('key', 'section', 'field_type')
    @classmethod
    def validate_string_fields(cls, v):
        if v:
            return v.strip()
        return v or ""

    @field_validator('label', 'description')
    @classmethod
    def validate_text_fields(cls, v):
        if v:
            return sanitize_html(v.strip())
        return v or ""

    @field_validator('field_type')
    @classmethod
    def validate_field_type(cls, v, info: ValidationInfo):
        if v not in FIELD_TYPE_VALUES and _is_strict(info):
            raise ValueError(f"Unknown field type '{v}'")
        return v

    @field_validator('conditional')
    @classmethod
    def validate_conditional(cls, v):
        if v is not None and v.is_group():
            raise ValueError('Field conditional must be a single rule, not a group')
        return v


class FormTemplateSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    category: str = Field(default="", max_length=50)
    version: str = Field(default="1.0", max_length=20)
    fields: List[FormFieldSchema] = Field(default_factory=list)
    conditions: List[ConditionSchema] = Field(default_factory=list)

    @field_validator('name', 'category', 'version')
    @classmethod
    def validate_string_fields(cls, v):
        if v:
            return v.strip()
        return v or ""

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if v:
            return sanitize_html(v.strip())
        return v or ""

    @model_validator(mode='after')
    def validate_template(self, info: ValidationInfo):
        seen = set()
        for field in self.fields:
            if field.key in seen:
                raise ValueError(f"Duplicate field key '{field.key}'")
            seen.add(field.key)

        max_conditions = (info.context or {}).get('max_conditions')
        if max_conditions is not None and len(self.conditions) > max_conditions:
            raise ValueError(f"Too many conditions (max {max_conditions})")
        return self

    def field_keys(self) -> List[str]:
        return [field.key for field in self.fields]

    def get_field(self, key) -> Optional[FormFieldSchema]:
        for field in self.fields:
            if field.key == key:
                return field
        return None

    def condition_dicts(self) -> List[Dict[str, Any]]:
        return [condition.to_dict() for condition in self.conditions]

    def unknown_targets(self) -> List[str]:
        """Condition target ids that match no field in the template."""
        keys = set(self.field_keys())
        return sorted({c.id for c in self.conditions if c.id not in keys})

    def unknown_references(self) -> List[str]:
        """Field names read by rules that match no field in the template."""
        keys = set(self.field_keys())
        referenced = set()
        for condition in self.conditions:
            referenced.update(condition.referenced_fields())
        for field in self.fields:
            if field.conditional is not None:
                referenced.update(field.conditional.referenced_fields())
        return sorted(name for name in referenced if name not in keys)


def _validation_context(strict, config):
    config = config or ConfigManager()
    return {
        'strict': config.strict_conditions if strict is None else strict,
        'max_rule_depth': config.max_rule_depth,
        'max_conditions': config.max_conditions,
    }


def _load_json(data, what):
    if isinstance(data, (str, bytes)):
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid {what} JSON: {e}") from e
    return data


def parse_conditions(data, strict=None, config=None) -> List[Dict[str, Any]]:
    """Validate a condition list and return it as plain dicts for evaluation.

    Args:
        data: A list of condition dicts, or its JSON text. ``None`` and empty
            text yield an empty list.
        strict (bool, optional): Reject unknown operators, actions and logic
            keywords. Defaults to the ``strict_conditions`` setting.
        config (ConfigManager, optional): Settings to use instead of the
            environment.

    Raises:
        ValidationError: If the data is not a valid condition list.
    """
    if data is None or (isinstance(data, (str, bytes)) and not data.strip()):
        return []
    data = _load_json(data, 'conditions')
    if not isinstance(data, list):
        raise ValidationError('Conditions must be a JSON array')

    context = _validation_context(strict, config)
    if len(data) > context['max_conditions']:
        raise ValidationError(f"Too many conditions (max {context['max_conditions']})")
    try:
        conditions = [ConditionSchema.model_validate(item, context=context) for item in data]
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid conditions: {e}") from e
    return [condition.to_dict() for condition in conditions]


def load_template(data, strict=None, config=None) -> FormTemplateSchema:
    """Validate a form template given as a dict or JSON text.

    Raises:
        ValidationError: If the template is malformed.
    """
    data = _load_json(data, 'template')
    if not isinstance(data, dict):
        raise ValidationError('Template must be a JSON object')
    try:
        template = FormTemplateSchema.model_validate(data, context=_validation_context(strict, config))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid template: {e}") from e

    logger.debug(f"Loaded template '{template.name}' with {len(template.fields)} fields "
                 f"and {len(template.conditions)} conditions")
    return template


def load_template_file(path, strict=None, config=None) -> FormTemplateSchema:
    """Read and validate a form template JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return load_template(f.read(), strict=strict, config=config)
