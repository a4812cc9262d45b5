import enum


class Operator(str, enum.Enum):
    """Comparison operators available to a conditional rule.

    Used as the ``operator`` key of leaf rules in form templates.
    """
    CONTAINS = "contains"
    EQUALS = "equals"
    GREATER_THAN = "greater_than"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    LESS_THAN = "less_than"
    NOT_EQUALS = "not_equals"


class Action(str, enum.Enum):
    """Side effect a condition applies to its target field.

    ``show``, ``enable`` and ``require`` pass the rule result through;
    ``hide``, ``disable`` and ``optional`` negate it.
    """
    DISABLE = "disable"
    ENABLE = "enable"
    HIDE = "hide"
    OPTIONAL = "optional"
    REQUIRE = "require"
    SHOW = "show"


class Logic(str, enum.Enum):
    """Combinator used by a rule group."""
    AND = "and"
    OR = "or"


class FieldType(str, enum.Enum):
    """Field input types used in form templates."""
    CHECKBOX = "checkbox"
    DATE = "date"
    FILE = "file"
    GPS = "gps"
    NUMBER = "number"
    PHOTO = "photo"
    RADIO = "radio"
    RATING = "rating"
    SELECT = "select"
    SIGNATURE = "signature"
    TEXT = "text"
    TIME = "time"


NEGATING_ACTIONS = frozenset({Action.HIDE.value, Action.DISABLE.value, Action.OPTIONAL.value})
