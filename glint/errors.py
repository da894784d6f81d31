"""Diagnostics and exception types for Glint.

Every failure in the pipeline is described by a `Diagnostic`: the kind of
error, the span it points at, optional secondary spans, a message, help text
and did-you-mean suggestions. Diagnostics travel inside `GlintError`
exceptions; each pipeline stage raises its own subclass (`LexError`,
`ParseError`, `EvaluationError`) and callers let it propagate unchanged.

The functions at the bottom of this module build the exception for each
error kind, so the call sites read as `raise key_not_found(...)`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from .span import Span
from .suggest import suggest


class ErrorKind(Enum):
    """Closed set of Glint error kinds: (code, stage, category)."""

    INVALID_CHARACTER = ('E0101', 'lex', 'Lexical error')
    MALFORMED_NUMBER = ('E0102', 'lex', 'Lexical error')
    UNTERMINATED_STRING = ('E0103', 'lex', 'Lexical error')

    UNEXPECTED_TOKEN = ('E0201', 'parse', 'Syntax error')
    UNEXPECTED_EOF = ('E0202', 'parse', 'Syntax error')
    UNCLOSED_DELIMITER = ('E0203', 'parse', 'Syntax error')
    NESTING_TOO_DEEP = ('E0204', 'parse', 'Syntax error')

    UNDEFINED_VARIABLE = ('E0301', 'runtime', 'Runtime error')
    UNDEFINED_FUNCTION = ('E0302', 'runtime', 'Runtime error')

    TYPE_MISMATCH = ('E0401', 'runtime', 'Type error')
    WRONG_ARGUMENT_COUNT = ('E0402', 'runtime', 'Function error')
    ARGUMENT_TYPE_ERROR = ('E0403', 'runtime', 'Function error')
    UNKNOWN_ARGUMENT = ('E0404', 'runtime', 'Function error')
    DUPLICATE_ARGUMENT = ('E0405', 'runtime', 'Function error')
    INVALID_COMPARISON = ('E0406', 'runtime', 'Logical operation error')

    INDEX_OUT_OF_BOUNDS = ('E0501', 'runtime', 'Index error')
    KEY_NOT_FOUND = ('E0502', 'runtime', 'Key error')
    INVALID_INDEX_TYPE = ('E0503', 'runtime', 'Collection operation error')
    INVALID_KEY_TYPE = ('E0504', 'runtime', 'Collection operation error')
    INVALID_MEMBERSHIP = ('E0505', 'runtime', 'Collection operation error')
    NOT_INDEXABLE = ('E0506', 'runtime', 'Collection operation error')
    VALUE_TOO_DEEP = ('E0507', 'runtime', 'Collection operation error')

    DIVISION_BY_ZERO = ('E0601', 'runtime', 'Runtime error')
    INTEGER_OVERFLOW = ('E0602', 'runtime', 'Runtime error')

    def __init__(self, code: str, stage: str, category: str):
        self.code = code
        self.stage = stage
        self.category = category


@dataclass(frozen=True)
class Label:
    """A secondary span with the note printed beneath it."""
    span: Span
    message: str


@dataclass(frozen=True)
class Diagnostic:
    """Everything needed to report one error, independent of the source."""
    kind: ErrorKind
    message: str
    primary_span: Span
    label: str = ''
    secondary: Tuple[Label, ...] = ()
    help_text: Optional[str] = None
    suggestions: Tuple[str, ...] = ()
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def secondary_spans(self) -> Tuple[Span, ...]:
        return tuple(label.span for label in self.secondary)

    def with_help(self, help_text: str) -> 'Diagnostic':
        return replace(self, help_text=help_text)

    def with_label(self, span: Span, message: str) -> 'Diagnostic':
        return replace(self, secondary=self.secondary + (Label(span, message),))


class GlintError(Exception):
    """Base exception carrying a `Diagnostic`."""
    def __init__(self, diagnostic: Diagnostic):
        super().__init__(f"{diagnostic.kind.category}: {diagnostic.message}")
        self.diagnostic = diagnostic

    @property
    def kind(self) -> ErrorKind:
        return self.diagnostic.kind

    @property
    def span(self) -> Span:
        return self.diagnostic.primary_span


class LexError(GlintError):
    """Raised by the lexer at the first unrecognised character or literal."""


class ParseError(GlintError):
    """Raised by the parser; the language's syntax errors."""


class EvaluationError(GlintError):
    """Raised by the evaluator; aborts the current statement only."""


def _names(names: Iterable[str]) -> str:
    return ', '.join(names)


###############################################################################
# Lexical errors
###############################################################################

def invalid_character(ch: str, span: Span, hint: Optional[str] = None) -> LexError:
    return LexError(Diagnostic(
        ErrorKind.INVALID_CHARACTER,
        f"invalid character {ch!r}",
        span,
        label='invalid character here',
        help_text=hint or 'remove the character or put it inside a string literal',
        data={'character': ch},
    ))


def malformed_number(text: str, span: Span, reason: str = '') -> LexError:
    return LexError(Diagnostic(
        ErrorKind.MALFORMED_NUMBER,
        f"malformed number '{text}'" + (f" ({reason})" if reason else ''),
        span,
        label='malformed number',
        help_text='numbers are written as 123 or 123.456',
        data={'text': text},
    ))


def unterminated_string(span: Span) -> LexError:
    return LexError(Diagnostic(
        ErrorKind.UNTERMINATED_STRING,
        'unterminated string literal',
        span,
        label='string starts here',
        help_text='add a closing \'"\'',
    ))


###############################################################################
# Syntax errors
###############################################################################

def _expected_help(expected: Sequence[str]) -> str:
    if len(expected) == 1:
        return f"expected {expected[0]}"
    return f"expected one of: {_names(expected)}"


def unexpected_token(found: str, span: Span, expected: Sequence[str]) -> ParseError:
    expected = sorted(set(expected))
    return ParseError(Diagnostic(
        ErrorKind.UNEXPECTED_TOKEN,
        f"unexpected {found}",
        span,
        label='unexpected token',
        help_text=_expected_help(expected),
        data={'found': found, 'expected': expected},
    ))


def unexpected_eof(span: Span, expected: Sequence[str]) -> ParseError:
    expected = sorted(set(expected))
    return ParseError(Diagnostic(
        ErrorKind.UNEXPECTED_EOF,
        'unexpected end of input',
        span,
        label='expected more input here',
        help_text=_expected_help(expected),
        data={'expected': expected},
    ))


def unclosed_delimiter(opener: str, closer: str, open_span: Span,
                       found: str, found_span: Span) -> ParseError:
    return ParseError(Diagnostic(
        ErrorKind.UNCLOSED_DELIMITER,
        f"unclosed '{opener}'",
        open_span,
        label=f"this '{opener}' is never closed",
        secondary=(Label(found_span, f"expected '{closer}' before {found}"),),
        help_text=f"add '{closer}' to close it",
        data={'opener': opener, 'closer': closer, 'found': found, 'expected': [closer]},
    ))


def nesting_too_deep(span: Span, limit: int, label: str = 'nesting exceeds the limit here') -> ParseError:
    return ParseError(Diagnostic(
        ErrorKind.NESTING_TOO_DEEP,
        f"expression is nested more than {limit} levels deep",
        span,
        label=label,
        help_text='split the expression into smaller assignments',
        data={'limit': limit},
    ))


###############################################################################
# Runtime errors
###############################################################################

def undefined_variable(name: str, span: Span, available: Iterable[str]) -> EvaluationError:
    available = sorted(available)
    if available:
        help_text = f"available variables: {_names(available)}"
    else:
        help_text = 'no variables are defined yet; assign one with name = value'
    return EvaluationError(Diagnostic(
        ErrorKind.UNDEFINED_VARIABLE,
        f"undefined variable '{name}'",
        span,
        label='not defined',
        help_text=help_text,
        suggestions=tuple(suggest(name, available)),
        data={'name': name, 'available': available},
    ))


def undefined_function(name: str, span: Span, available: Iterable[str]) -> EvaluationError:
    available = sorted(available)
    return EvaluationError(Diagnostic(
        ErrorKind.UNDEFINED_FUNCTION,
        f"undefined function '{name}'",
        span,
        label='unknown function',
        help_text=f"available functions: {_names(available)}" if available else 'no functions are available',
        suggestions=tuple(suggest(name, available)),
        data={'name': name, 'available': available},
    ))


def type_mismatch(message: str, span: Span, expected: str, actual: str,
                  label: str = 'type error', secondary: Sequence[Label] = (),
                  help_text: Optional[str] = None) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.TYPE_MISMATCH,
        message,
        span,
        label=label,
        secondary=tuple(secondary),
        help_text=help_text or 'check that the operands have compatible types',
        data={'expected': expected, 'actual': actual},
    ))


def invalid_comparison(op: str, message: str, span: Span, op_span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.INVALID_COMPARISON,
        message,
        span,
        label='not a number',
        secondary=(Label(op_span, f"'{op}' comparison"),),
        help_text='comparison operators require both operands to be numbers',
        data={'operator': op},
    ))


def wrong_argument_count(function: str, expected: str, actual: int, span: Span,
                         missing: Sequence[str] = ()) -> EvaluationError:
    if missing:
        message = f"{function}() missing required argument(s): {_names(missing)}"
        help_text = (f"provide {_names(missing)} either positionally or as "
                     f"{missing[0]} = value")
    else:
        message = f"{function}() expects {expected}, got {actual}"
        help_text = 'check the number of arguments in the call'
    return EvaluationError(Diagnostic(
        ErrorKind.WRONG_ARGUMENT_COUNT,
        message,
        span,
        label='function call',
        help_text=help_text,
        data={'function': function, 'expected': expected, 'actual': actual,
              'missing': list(missing)},
    ))


def argument_type_error(function: str, position: int, parameter: str, expected: str,
                        actual: str, actual_display: str, span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.ARGUMENT_TYPE_ERROR,
        f"{function}() argument {position} ({parameter}) must be {expected}, "
        f"got {actual} (value: {actual_display})",
        span,
        label='wrong argument type',
        help_text=f"pass {expected} as argument {position}",
        data={'function': function, 'position': position, 'parameter': parameter,
              'expected': expected, 'actual': actual},
    ))


def unknown_argument(function: str, name: str, span: Span, valid: Sequence[str]) -> EvaluationError:
    if valid:
        help_text = f"valid parameters for {function}(): {_names(valid)}"
    else:
        help_text = f"{function}() takes no parameters"
    return EvaluationError(Diagnostic(
        ErrorKind.UNKNOWN_ARGUMENT,
        f"unknown parameter '{name}' in call to {function}()",
        span,
        label='unknown parameter',
        help_text=help_text,
        suggestions=tuple(suggest(name, valid)),
        data={'function': function, 'name': name, 'valid': list(valid)},
    ))


def duplicate_argument(function: str, name: str, span: Span, first_span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.DUPLICATE_ARGUMENT,
        f"parameter '{name}' given more than once in call to {function}()",
        span,
        label='given again here',
        secondary=(Label(first_span, 'first given here'),),
        help_text=f"remove one of the values for '{name}'",
        data={'function': function, 'name': name},
    ))


def index_out_of_bounds(index: int, length: int, target_span: Span, index_span: Span) -> EvaluationError:
    if length:
        help_text = f"valid indices are 0 to {length - 1}"
    else:
        help_text = 'the list is empty'
    return EvaluationError(Diagnostic(
        ErrorKind.INDEX_OUT_OF_BOUNDS,
        f"list index {index} is out of bounds (length: {length})",
        index_span,
        label='index out of bounds',
        secondary=(Label(target_span, f"this list has {length} element(s)"),),
        help_text=help_text,
        data={'index': index, 'length': length},
    ))


def key_not_found(key: str, span: Span, available: Sequence[str]) -> EvaluationError:
    available = list(available)
    if available:
        help_text = f"available keys: {_names(available)}"
    else:
        help_text = 'the dictionary is empty'
    return EvaluationError(Diagnostic(
        ErrorKind.KEY_NOT_FOUND,
        f"key '{key}' not found",
        span,
        label='key not found',
        help_text=help_text,
        suggestions=tuple(suggest(key, available)),
        data={'key': key, 'available_keys': available},
    ))


def invalid_index_type(actual: str, span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.INVALID_INDEX_TYPE,
        f"list indices must be integers, not {actual}",
        span,
        label='not an integer',
        help_text='use integers for list indexing: items[0]',
        data={'actual': actual},
    ))


def invalid_key_type(actual: str, span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.INVALID_KEY_TYPE,
        f"dictionary keys must be strings, not {actual}",
        span,
        label='not a string',
        help_text='use strings for dictionary keys: table["key"]',
        data={'actual': actual},
    ))


def invalid_membership(op: str, actual: str, span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.INVALID_MEMBERSHIP,
        f"cannot use '{op}' with {actual}; only lists and dictionaries support membership tests",
        span,
        label='not a list or dictionary',
        help_text="use 'item in list' or 'key in dictionary'",
        data={'operator': op, 'actual': actual},
    ))


def not_indexable(actual: str, span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.NOT_INDEXABLE,
        f"cannot index {actual} values; only lists and dictionaries support indexing",
        span,
        label='not indexable',
        help_text='use integers for list indexing and strings for dictionary keys',
        data={'actual': actual},
    ))


def value_too_deep(limit: int, span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.VALUE_TOO_DEEP,
        f"collection is nested more than {limit} levels deep",
        span,
        label='collection built here',
        help_text='keep fewer levels of lists and dictionaries inside each other',
        data={'limit': limit},
    ))


def division_by_zero(op_span: Span, divisor_span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.DIVISION_BY_ZERO,
        'division by zero',
        op_span,
        label='division by zero occurs here',
        secondary=(Label(divisor_span, 'divisor evaluates to zero'),),
        help_text='check the divisor value before dividing',
    ))


def integer_overflow(span: Span) -> EvaluationError:
    return EvaluationError(Diagnostic(
        ErrorKind.INTEGER_OVERFLOW,
        'integer result does not fit in 64 bits',
        span,
        label='overflow',
        help_text='use a float operand to work with larger magnitudes',
    ))


def compound_assignment_help(name: str, op: str) -> str:
    """Help text attached to errors raised while applying `name op= value`."""
    if op == '+=':
        return (f"make sure '{name}' holds a number, or a string to append to; "
                f"use '{name} = value' to set a new value")
    return f"make sure '{name}' holds a number before using '{op}'"
