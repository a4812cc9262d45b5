"""Field value model for conditional logic evaluation.

Form values arrive deserialized from JSON, so a value is one of a closed set
of kinds: text, number, boolean, a list of values, null (``None``) or absent
(the field has no entry at all, represented by :data:`ABSENT`). The helpers
here define equality, emptiness and coercion over exactly those kinds so that
every rule operator has well-defined behavior for every input.
"""

import math
import re
from typing import Any, List, Mapping, Union


class _Absent:
    """Marker for a field with no entry in the value mapping."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'ABSENT'

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()

Value = Union[str, int, float, bool, List[Any], None, _Absent]

# Decimal literal with optional fraction and exponent, e.g. "10", "-1.5", ".5e3"
_DECIMAL_PATTERN = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$')
_INFINITY_PATTERN = re.compile(r'^([+-]?)Infinity$')
_RADIX_PATTERN = re.compile(r'^0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))$')


def lookup(values: Mapping, field) -> Value:
    """Return the value stored for ``field``, or ABSENT when there is none."""
    if values is None:
        return ABSENT
    try:
        return values[field]
    except (KeyError, TypeError):
        return ABSENT


def _is_sequence(value):
    return isinstance(value, (list, tuple))


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_empty(value: Value) -> bool:
    """True for absent, null, empty text and empty lists."""
    if value is ABSENT or value is None:
        return True
    if isinstance(value, str):
        return value == ''
    if _is_sequence(value):
        return len(value) == 0
    return False


def strict_equals(left: Value, right: Value) -> bool:
    """Compare two values without cross-kind coercion.

    ``1 == 1.0`` holds, but ``True`` never equals ``1`` and ``"1"`` never
    equals ``1``. Lists and objects compare element by element with the same
    rules. Absent only equals absent and null only equals null.
    """
    if left is ABSENT or right is ABSENT:
        return left is right
    if left is None or right is None:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) or _is_number(right):
        return _is_number(left) and _is_number(right) and left == right
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right
    if _is_sequence(left) or _is_sequence(right):
        if not (_is_sequence(left) and _is_sequence(right)) or len(left) != len(right):
            return False
        return all(strict_equals(a, b) for a, b in zip(left, right))
    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if set(left) != set(right):
            return False
        return all(strict_equals(left[key], right[key]) for key in left)
    return type(left) is type(right) and left == right


def _parse_numeric_text(text):
    text = text.strip()
    if text == '':
        return 0.0
    if _DECIMAL_PATTERN.match(text):
        return float(text)
    match = _INFINITY_PATTERN.match(text)
    if match:
        return -math.inf if match.group(1) == '-' else math.inf
    match = _RADIX_PATTERN.match(text)
    if match:
        if match.group('hex'):
            return float(int(match.group('hex'), 16))
        if match.group('oct'):
            return float(int(match.group('oct'), 8))
        return float(int(match.group('bin'), 2))
    return math.nan


def to_number(value: Value) -> float:
    """Coerce a value to a float, returning NaN when it has no numeric reading.

    Null and empty text read as 0, booleans as 1/0, absent as NaN. Lists read
    through their text form, so ``[]`` is 0, ``["7"]`` is 7 and ``[1, 2]`` is
    NaN.
    """
    if value is ABSENT:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        return _parse_numeric_text(value)
    if _is_sequence(value):
        return _parse_numeric_text(to_text(value))
    return math.nan


def to_text(value: Value) -> str:
    """Render a value as text for substring matching."""
    if isinstance(value, str):
        return value
    if value is ABSENT:
        return 'undefined'
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if _is_sequence(value):
        return ','.join('' if item is None or item is ABSENT else to_text(item) for item in value)
    if isinstance(value, Mapping):
        return '[object Object]'
    return str(value)
