"""Abstract Syntax Tree (AST) definitions for the Glint language.

The classes in this module describe the structure of parsed Glint programs.
A program is a list of statements; each statement is a bare expression, a
simple assignment or a compound assignment. Every node records the span of
source text it was parsed from, covering all of its sub-expressions, so the
evaluator can point diagnostics at the right place.

Nodes are frozen dataclasses and own their children directly; nothing is
mutated after the parser builds the tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .span import Span


class BinaryOperator(Enum):
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    EQ = '=='
    NE = '!='
    LT = '<'
    GT = '>'
    LE = '<='
    GE = '>='
    AND = 'and'
    OR = 'or'
    IN = 'in'
    NOT_IN = 'not in'

    @property
    def is_arithmetic(self) -> bool:
        return self in (BinaryOperator.ADD, BinaryOperator.SUB,
                        BinaryOperator.MUL, BinaryOperator.DIV)

    @property
    def is_comparison(self) -> bool:
        return self in (BinaryOperator.LT, BinaryOperator.GT,
                        BinaryOperator.LE, BinaryOperator.GE)


class UnaryOperator(Enum):
    NOT = 'not'
    NEG = '-'
    POS = '+'


class CompoundOperator(Enum):
    """`+=`, `-=`, `*=` and `/=`; each maps onto the matching binary operator."""
    ADD = '+='
    SUB = '-='
    MUL = '*='
    DIV = '/='

    @property
    def binary(self) -> BinaryOperator:
        return _COMPOUND_TO_BINARY[self]


_COMPOUND_TO_BINARY = {
    CompoundOperator.ADD: BinaryOperator.ADD,
    CompoundOperator.SUB: BinaryOperator.SUB,
    CompoundOperator.MUL: BinaryOperator.MUL,
    CompoundOperator.DIV: BinaryOperator.DIV,
}


###############################################################################
# Expressions
###############################################################################


@dataclass(frozen=True)
class IntLiteral:
    value: int
    span: Span


@dataclass(frozen=True)
class FloatLiteral:
    value: float
    span: Span


@dataclass(frozen=True)
class BoolLiteral:
    value: bool
    span: Span


@dataclass(frozen=True)
class StrLiteral:
    value: str
    span: Span


@dataclass(frozen=True)
class Identifier:
    name: str
    span: Span


@dataclass(frozen=True)
class BinaryOp:
    op: BinaryOperator
    left: 'Expr'
    right: 'Expr'
    op_span: Span
    span: Span


@dataclass(frozen=True)
class UnaryOp:
    op: UnaryOperator
    operand: 'Expr'
    op_span: Span
    span: Span


@dataclass(frozen=True)
class KeywordArg:
    name: str
    name_span: Span
    value: 'Expr'

    @property
    def span(self) -> Span:
        return self.name_span.merge(self.value.span)


@dataclass(frozen=True)
class Call:
    name: str
    name_span: Span
    args: Tuple['Expr', ...]
    kwargs: Tuple[KeywordArg, ...]
    span: Span


@dataclass(frozen=True)
class ListLiteral:
    elements: Tuple['Expr', ...]
    span: Span


@dataclass(frozen=True)
class DictEntry:
    key: str  # decoded string literal
    key_span: Span
    value: 'Expr'


@dataclass(frozen=True)
class DictLiteral:
    entries: Tuple[DictEntry, ...]
    span: Span


@dataclass(frozen=True)
class Index:
    target: 'Expr'
    index: 'Expr'
    span: Span


Expr = Union[IntLiteral, FloatLiteral, BoolLiteral, StrLiteral, Identifier,
             BinaryOp, UnaryOp, Call, ListLiteral, DictLiteral, Index]


###############################################################################
# Statements
###############################################################################


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr
    span: Span


@dataclass(frozen=True)
class Assign:
    name: str
    name_span: Span
    value: Expr
    span: Span


@dataclass(frozen=True)
class CompoundAssign:
    name: str
    name_span: Span
    op: CompoundOperator
    op_span: Span
    value: Expr
    span: Span


Stmt = Union[ExprStmt, Assign, CompoundAssign]


def child_expressions(node: Expr) -> Tuple[Expr, ...]:
    if isinstance(node, BinaryOp):
        return (node.left, node.right)
    if isinstance(node, UnaryOp):
        return (node.operand,)
    if isinstance(node, Call):
        return node.args + tuple(kw.value for kw in node.kwargs)
    if isinstance(node, ListLiteral):
        return node.elements
    if isinstance(node, DictLiteral):
        return tuple(entry.value for entry in node.entries)
    if isinstance(node, Index):
        return (node.target, node.index)
    return ()


def expression_depth(expr: Expr) -> int:
    """Height of an expression tree, measured without recursing."""
    deepest = 0
    pending = [(expr, 1)]
    while pending:
        node, depth = pending.pop()
        deepest = max(deepest, depth)
        pending.extend((child, depth + 1) for child in child_expressions(node))
    return deepest
