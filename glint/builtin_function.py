"""Built-in function signatures and argument binding.

A `FunctionSignature` names a built-in's fixed parameters, an optional
variadic parameter and the Python callable that implements it. When a call
is evaluated the interpreter turns each argument into an `Argument` (value,
span and 1-based position) and `bind_arguments` matches them against the
signature:

* positional arguments fill fixed parameters in order, and any extras go to
  the variadic tail, if there is one;
* a keyword argument fills the fixed parameter it names, or is appended to
  the variadic tail when it uses the variadic parameter's name;
* every fixed parameter must end up filled.

Violations raise `EvaluationError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from glint.errors import (
    argument_type_error,
    duplicate_argument,
    unknown_argument,
    wrong_argument_count,
)
from glint.span import Span
from glint.types import Value, to_display, type_name


@dataclass(frozen=True)
class Argument:
    value: Value
    span: Span
    position: int  # 1-based position in the call
    parameter: str = ''


@dataclass
class BoundArguments:
    function: str
    call_span: Span
    fixed: Dict[str, Argument] = field(default_factory=dict)
    rest: List[Argument] = field(default_factory=list)

    def __getitem__(self, name: str) -> Value:
        return self.fixed[name].value

    def argument(self, name: str) -> Argument:
        return self.fixed[name]

    def rest_values(self) -> List[Value]:
        return [arg.value for arg in self.rest]

    def type_error(self, arg: Argument, expected: str):
        """Build the error for an argument whose value has the wrong type."""
        return argument_type_error(self.function, arg.position, arg.parameter, expected,
                                   type_name(arg.value), to_display(arg.value), arg.span)


@dataclass(frozen=True)
class FunctionSignature:
    name: str
    params: Tuple[str, ...]
    impl: Callable[[BoundArguments], Value]
    variadic: Optional[str] = None
    min_variadic: int = 0
    doc: str = ''

    def describe_arity(self) -> str:
        if self.variadic is None:
            count = len(self.params)
            return f"{count} argument{'s' if count != 1 else ''}"
        count = len(self.params) + self.min_variadic
        return f"at least {count} argument{'s' if count != 1 else ''}"

    def parameter_names(self) -> List[str]:
        names = list(self.params)
        if self.variadic is not None:
            names.append(self.variadic)
        return names

    def usage(self) -> str:
        """Call form shown by the REPL's help, e.g. `sum(*values)`."""
        return f"{self.name}({', '.join(self.params + (('*' + self.variadic,) if self.variadic else ()))})"

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


def bind_arguments(signature: FunctionSignature, positional: Sequence[Argument],
                   keywords: Sequence[Tuple[str, Span, Argument]], call_span: Span) -> BoundArguments:
    """Match evaluated call arguments against `signature`.

    `keywords` holds `(name, name_span, argument)` triples in call order.
    """
    bound = BoundArguments(signature.name, call_span)
    # where each fixed parameter was first supplied, for duplicate reports
    supplied_at: Dict[str, Span] = {}
    total = len(positional) + len(keywords)

    for i, arg in enumerate(positional):
        if i < len(signature.params):
            name = signature.params[i]
            bound.fixed[name] = _named(arg, name)
            supplied_at[name] = arg.span
        elif signature.variadic is not None:
            bound.rest.append(_named(arg, signature.variadic))
        else:
            raise wrong_argument_count(signature.name, signature.describe_arity(), total, call_span)

    for name, name_span, arg in keywords:
        if name in signature.params:
            if name in bound.fixed:
                raise duplicate_argument(signature.name, name, name_span, supplied_at[name])
            bound.fixed[name] = _named(arg, name)
            supplied_at[name] = name_span
        elif name == signature.variadic:
            bound.rest.append(_named(arg, name))
        else:
            raise unknown_argument(signature.name, name, name_span, signature.parameter_names())

    missing = [name for name in signature.params if name not in bound.fixed]
    if missing:
        raise wrong_argument_count(signature.name, signature.describe_arity(), total,
                                   call_span, missing=missing)
    if len(bound.rest) < signature.min_variadic:
        raise wrong_argument_count(signature.name, signature.describe_arity(), total, call_span)
    return bound


def _named(arg: Argument, parameter: str) -> Argument:
    return Argument(arg.value, arg.span, arg.position, parameter)
