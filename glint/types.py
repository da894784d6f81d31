"""Runtime values for Glint.

Glint values form a closed set: integers, floats, booleans, strings, lists
and dictionaries. Each kind is a frozen dataclass; a list holds a tuple of
values and a dictionary a tuple of `(key, value)` pairs in insertion order.
Values are never mutated. Assigning to a variable replaces the binding.

The helpers in this module (`type_name`, `is_truthy`, `values_equal`,
`to_display`, `from_python`, `to_python`) handle every kind explicitly and
raise `TypeError` for anything else. Such an error is an interpreter bug,
never a mistake in a Glint program.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

# Lists and dictionaries nest at most this deep; the recursive helpers below
# stay well inside Python's recursion limit.
MAX_VALUE_DEPTH = 100


@dataclass(frozen=True)
class IntVal:
    value: int


@dataclass(frozen=True)
class FloatVal:
    value: float


@dataclass(frozen=True)
class BoolVal:
    value: bool


@dataclass(frozen=True)
class StrVal:
    value: str


@dataclass(frozen=True)
class ListVal:
    items: Tuple['Value', ...] = ()
    depth: int = field(default=1, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'depth', 1 + max(map(nesting_depth, self.items), default=0))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator['Value']:
        return iter(self.items)


@dataclass(frozen=True)
class DictVal:
    """A string-keyed dictionary.

    Keys are unique and keep the order in which they were first inserted.
    Use `DictVal.from_pairs` to build one from pairs that may repeat a key;
    the last value for a key wins.
    """
    entries: Tuple[Tuple[str, 'Value'], ...] = ()
    depth: int = field(default=1, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'depth', 1 + max((nesting_depth(v) for _, v in self.entries), default=0))

    @staticmethod
    def from_pairs(pairs: Iterable[Tuple[str, 'Value']]) -> 'DictVal':
        merged: Dict[str, Value] = {}
        for key, value in pairs:
            merged[key] = value
        return DictVal(tuple(merged.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def get(self, key: str) -> Optional['Value']:
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def __contains__(self, key: str) -> bool:
        return any(k == key for k, _ in self.entries)


Value = Union[IntVal, FloatVal, BoolVal, StrVal, ListVal, DictVal]

NUMERIC = (IntVal, FloatVal)


def nesting_depth(value: Value) -> int:
    """Levels of lists and dictionaries in `value`; 0 for scalars."""
    if isinstance(value, (ListVal, DictVal)):
        return value.depth
    return 0


def fits_int64(number: int) -> bool:
    return INT_MIN <= number <= INT_MAX


def is_numeric(value: Value) -> bool:
    """True for integers and floats. Booleans are not numbers."""
    return isinstance(value, NUMERIC)


def type_name(value: Value) -> str:
    """Return the Glint type name of a runtime value."""
    if isinstance(value, IntVal):
        return 'integer'
    if isinstance(value, FloatVal):
        return 'float'
    if isinstance(value, BoolVal):
        return 'boolean'
    if isinstance(value, StrVal):
        return 'string'
    if isinstance(value, ListVal):
        return 'list'
    if isinstance(value, DictVal):
        return 'dictionary'
    raise TypeError(f"not a Glint value: {value!r}")


def is_truthy(value: Value) -> bool:
    """`false`, `0`, `0.0`, `""`, `[]` and `{}` are falsy; everything else is truthy."""
    if isinstance(value, BoolVal):
        return value.value
    if isinstance(value, IntVal):
        return value.value != 0
    if isinstance(value, FloatVal):
        return value.value != 0.0
    if isinstance(value, StrVal):
        return len(value.value) > 0
    if isinstance(value, ListVal):
        return len(value.items) > 0
    if isinstance(value, DictVal):
        return len(value.entries) > 0
    raise TypeError(f"not a Glint value: {value!r}")


def values_equal(a: Value, b: Value) -> bool:
    """Structural equality used by `==`, `!=`, `in` and `not in`.

    Integers and floats compare numerically. Values of any other differing
    kinds are unequal; in particular `true` is not equal to `1`.
    """
    if is_numeric(a) and is_numeric(b):
        return a.value == b.value
    if isinstance(a, BoolVal) and isinstance(b, BoolVal):
        return a.value == b.value
    if isinstance(a, StrVal) and isinstance(b, StrVal):
        return a.value == b.value
    if isinstance(a, ListVal) and isinstance(b, ListVal):
        if len(a.items) != len(b.items):
            return False
        return all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if isinstance(a, DictVal) and isinstance(b, DictVal):
        if set(a.keys()) != set(b.keys()):
            return False
        for key, value in a.entries:
            if not values_equal(value, b.get(key)):
                return False
        return True
    # Anything else is a kind mismatch; make sure both really are values
    type_name(a)
    type_name(b)
    return False


STRING_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
}


def quote_string(text: str) -> str:
    """Write `text` as a double-quoted Glint string literal."""
    return '"' + ''.join(STRING_ESCAPES.get(ch, ch) for ch in text) + '"'


def format_float(number: float) -> str:
    """Shortest decimal form of `number` that the lexer reads back unchanged.

    Python's repr switches to exponent notation for very large and very small
    magnitudes; Glint literals have no exponent, so those are expanded.
    """
    if number != number or number in (float('inf'), float('-inf')):
        return repr(number)
    text = repr(number)
    if 'e' in text or 'E' in text:
        text = format(Decimal(text), 'f')
    if '.' not in text:
        text += '.0'
    return text


def to_display(value: Value) -> str:
    """Textual form of a value, as printed by the REPL.

    For literal values the text lexes and parses back to an equal value.
    """
    if isinstance(value, BoolVal):
        return 'true' if value.value else 'false'
    if isinstance(value, IntVal):
        return str(value.value)
    if isinstance(value, FloatVal):
        return format_float(value.value)
    if isinstance(value, StrVal):
        return quote_string(value.value)
    if isinstance(value, ListVal):
        return '[' + ', '.join(to_display(item) for item in value.items) + ']'
    if isinstance(value, DictVal):
        entries = ', '.join(f"{quote_string(k)}: {to_display(v)}" for k, v in value.entries)
        return '{' + entries + '}'
    raise TypeError(f"not a Glint value: {value!r}")


def from_python(obj: Any) -> Value:
    """Convert a plain Python object into a Glint value."""
    if isinstance(obj, NUMERIC + (BoolVal, StrVal, ListVal, DictVal)):
        return obj
    # bool is a subclass of int; check it first
    if isinstance(obj, bool):
        return BoolVal(obj)
    if isinstance(obj, int):
        return IntVal(obj)
    if isinstance(obj, float):
        return FloatVal(obj)
    if isinstance(obj, str):
        return StrVal(obj)
    if isinstance(obj, (list, tuple)):
        return ListVal(tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        pairs = []
        for key, item in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"dictionary keys must be str, got {type(key).__name__}")
            pairs.append((key, from_python(item)))
        return DictVal(tuple(pairs))
    raise TypeError(f"cannot convert {type(obj).__name__} to a Glint value")


def to_python(value: Value) -> Any:
    """Convert a Glint value into plain Python objects (lists and dicts)."""
    if isinstance(value, (IntVal, FloatVal, BoolVal, StrVal)):
        return value.value
    if isinstance(value, ListVal):
        return [to_python(item) for item in value.items]
    if isinstance(value, DictVal):
        return {key: to_python(item) for key, item in value.entries}
    raise TypeError(f"not a Glint value: {value!r}")
