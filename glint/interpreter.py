"""Tree-walking evaluator for the Glint language.

An `Interpreter` owns one environment and one registry of built-in
functions. `execute` runs a list of statements in order: assignments update
the environment, expression statements produce a value, and the value of the
last statement is returned. An `EvaluationError` aborts the statement that
raised it; bindings made by earlier statements stay in place.

The module also provides the library entry points `evaluate` (statements
against a caller-owned environment) and `run_source` (lex, parse and execute
a piece of source text).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import IO, List, Mapping, Optional

from .ast import (
    Assign,
    BinaryOp,
    BinaryOperator,
    BoolLiteral,
    Call,
    CompoundAssign,
    DictLiteral,
    Expr,
    ExprStmt,
    FloatLiteral,
    Identifier,
    Index,
    IntLiteral,
    ListLiteral,
    Stmt,
    StrLiteral,
    UnaryOp,
    UnaryOperator,
)
from .builtin_function import Argument, FunctionSignature, bind_arguments
from .diagnostics import format_diagnostic
from .environment import Environment
from .errors import (
    EvaluationError,
    Label,
    compound_assignment_help,
    division_by_zero,
    integer_overflow,
    invalid_comparison,
    invalid_index_type,
    invalid_key_type,
    invalid_membership,
    index_out_of_bounds,
    key_not_found,
    not_indexable,
    type_mismatch,
    undefined_function,
    undefined_variable,
    value_too_deep,
)
from .lexer import tokenize
from .parser import parse
from .span import Span
from .std import populate_standard_functions
from .types import (
    MAX_VALUE_DEPTH,
    BoolVal,
    DictVal,
    FloatVal,
    IntVal,
    ListVal,
    StrVal,
    Value,
    fits_int64,
    is_numeric,
    is_truthy,
    to_display,
    type_name,
    values_equal,
)


def with_article(name: str) -> str:
    return f"an {name}" if name[0] in 'aeiou' else f"a {name}"


class Interpreter:
    """Core interpreter that executes Glint statements.

    `debug_level` selects how much is traced: 1 for each statement, 2 adds
    assignments and call bindings, 3 adds every operator application. Trace
    lines go to `debug_file` (opened on first use) or to stdout when no file
    is given.
    """
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None,
                 functions: Optional[Mapping[str, FunctionSignature]] = None,
                 environment: Optional[Environment] = None):
        self.environment = environment if environment is not None else Environment()
        if functions is None:
            self.functions = populate_standard_functions()
        else:
            self.functions = MappingProxyType(dict(functions))
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[IO[str]] = None

    def debug(self, msg: str, level: int = 1) -> None:
        if self.debug_level < level:
            return
        if self.debug_file is None:
            print(msg)
            return
        if self.debug_fp is None:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        self.debug_fp.write(msg + '\n')
        self.debug_fp.flush()

    def close(self) -> None:
        if self.debug_fp is not None:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    ###########################################################################
    # Statements
    ###########################################################################

    def execute(self, statements: List[Stmt]) -> Optional[Value]:
        """Run `statements` in order and return the last one's value."""
        result: Optional[Value] = None
        for stmt in statements:
            try:
                result = self.execute_statement(stmt)
            except EvaluationError as e:
                self.debug(f"error {format_diagnostic(e.diagnostic)}")
                raise
        return result

    def execute_statement(self, stmt: Stmt) -> Optional[Value]:
        self.debug(f"execute {type(stmt).__name__} {stmt.span!r}")
        if isinstance(stmt, ExprStmt):
            return self.evaluate(stmt.expr)
        if isinstance(stmt, Assign):
            value = self.evaluate(stmt.value)
            self.environment.set(stmt.name, value)
            self.debug(f"assign {stmt.name}: {type_name(value)} = {to_display(value)}", 2)
            return None
        if isinstance(stmt, CompoundAssign):
            current = self.environment.get(stmt.name)
            if current is None:
                raise undefined_variable(stmt.name, stmt.name_span, self.environment.names())
            operand = self.evaluate(stmt.value)
            try:
                value = self.apply_binary(stmt.op.binary, current, operand, stmt.op_span,
                                          stmt.name_span, stmt.value.span)
            except EvaluationError as e:
                help_text = compound_assignment_help(stmt.name, stmt.op.value)
                raise EvaluationError(e.diagnostic.with_help(help_text)) from e
            self.environment.set(stmt.name, value)
            self.debug(f"assign {stmt.name} {stmt.op.value} -> {type_name(value)} = {to_display(value)}", 2)
            return None
        raise TypeError(f"execute: unexpected node type {type(stmt).__name__}")

    ###########################################################################
    # Expressions
    ###########################################################################

    def evaluate(self, node: Expr) -> Value:
        if isinstance(node, IntLiteral):
            return IntVal(node.value)
        if isinstance(node, FloatLiteral):
            return FloatVal(node.value)
        if isinstance(node, BoolLiteral):
            return BoolVal(node.value)
        if isinstance(node, StrLiteral):
            return StrVal(node.value)
        if isinstance(node, Identifier):
            value = self.environment.get(node.name)
            if value is None:
                raise undefined_variable(node.name, node.span, self.environment.names())
            return value
        if isinstance(node, ListLiteral):
            return self.check_nesting(ListVal(tuple(self.evaluate(el) for el in node.elements)), node.span)
        if isinstance(node, DictLiteral):
            pairs = ((entry.key, self.evaluate(entry.value)) for entry in node.entries)
            return self.check_nesting(DictVal.from_pairs(pairs), node.span)
        if isinstance(node, Index):
            target = self.evaluate(node.target)
            index = self.evaluate(node.index)
            return self.index_value(target, index, node)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand)
            return self.apply_unary(node, operand)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            # Short-circuit: the deciding operand is the result
            if node.op is BinaryOperator.AND:
                if not is_truthy(left):
                    return left
                return self.evaluate(node.right)
            if node.op is BinaryOperator.OR:
                if is_truthy(left):
                    return left
                return self.evaluate(node.right)
            right = self.evaluate(node.right)
            return self.apply_binary(node.op, left, right, node.op_span, node.left.span, node.right.span)
        if isinstance(node, Call):
            return self.call_function(node)
        raise TypeError(f"evaluate: unexpected node type {type(node).__name__}")

    def apply_unary(self, node: UnaryOp, operand: Value) -> Value:
        if node.op is UnaryOperator.NOT:
            return BoolVal(not is_truthy(operand))
        if isinstance(operand, IntVal):
            result = -operand.value if node.op is UnaryOperator.NEG else operand.value
            if not fits_int64(result):
                raise integer_overflow(node.span)
            return IntVal(result)
        if isinstance(operand, FloatVal):
            return FloatVal(-operand.value if node.op is UnaryOperator.NEG else operand.value)
        actual = type_name(operand)
        raise type_mismatch(
            f"unary '{node.op.value}' cannot be applied to {with_article(actual)}",
            node.operand.span, 'number', actual,
            label=f"this is {with_article(actual)}",
            secondary=[Label(node.op_span, f"unary '{node.op.value}'")],
            help_text=f"unary '{node.op.value}' works on integers and floats; use 'not' for booleans",
        )

    def apply_binary(self, op: BinaryOperator, left: Value, right: Value,
                     op_span: Span, left_span: Span, right_span: Span) -> Value:
        """Apply a non-short-circuit binary operator to two evaluated operands."""
        if self.debug_level >= 3:
            self.debug(f"binary {to_display(left)} {op.value} {to_display(right)}", 3)
        if op.is_arithmetic:
            return self.arithmetic(op, left, right, op_span, left_span, right_span)
        if op is BinaryOperator.EQ:
            return BoolVal(values_equal(left, right))
        if op is BinaryOperator.NE:
            return BoolVal(not values_equal(left, right))
        if op.is_comparison:
            return self.compare(op, left, right, op_span, left_span, right_span)
        if op in (BinaryOperator.IN, BinaryOperator.NOT_IN):
            found = self.contains(op, left, right, left_span, right_span)
            return BoolVal(found if op is BinaryOperator.IN else not found)
        raise TypeError(f"apply_binary: unexpected operator {op}")

    def arithmetic(self, op: BinaryOperator, left: Value, right: Value,
                   op_span: Span, left_span: Span, right_span: Span) -> Value:
        if op is BinaryOperator.ADD and isinstance(left, StrVal) and isinstance(right, StrVal):
            return StrVal(left.value + right.value)
        if not (is_numeric(left) and is_numeric(right)):
            lt, rt = type_name(left), type_name(right)
            if op is BinaryOperator.ADD and StrVal in (type(left), type(right)):
                help_text = "'+' joins two strings or adds two numbers; it does not mix them"
            else:
                help_text = f"'{op.value}' requires both operands to be numbers"
            raise type_mismatch(
                f"cannot apply '{op.value}' to {with_article(lt)} and {with_article(rt)}",
                op_span, 'number', f"{lt} and {rt}",
                label=f"'{op.value}' not supported for these types",
                secondary=[Label(left_span, f"this is {with_article(lt)}"),
                           Label(right_span, f"this is {with_article(rt)}")],
                help_text=help_text,
            )
        a, b = left.value, right.value
        if op is BinaryOperator.DIV:
            if b == 0:
                raise division_by_zero(op_span, right_span)
            # Division always produces a float, even for exact integer results
            return FloatVal(a / b)
        if op is BinaryOperator.ADD:
            result = a + b
        elif op is BinaryOperator.SUB:
            result = a - b
        else:
            result = a * b
        if isinstance(left, IntVal) and isinstance(right, IntVal):
            if not fits_int64(result):
                raise integer_overflow(left_span.merge(right_span))
            return IntVal(result)
        return FloatVal(float(result))

    def compare(self, op: BinaryOperator, left: Value, right: Value,
                op_span: Span, left_span: Span, right_span: Span) -> BoolVal:
        if not (is_numeric(left) and is_numeric(right)):
            lt, rt = type_name(left), type_name(right)
            offending = left_span if not is_numeric(left) else right_span
            raise invalid_comparison(
                op.value,
                f"cannot compare {with_article(lt)} and {with_article(rt)} with '{op.value}'",
                offending, op_span)
        a, b = left.value, right.value
        if op is BinaryOperator.LT:
            return BoolVal(a < b)
        if op is BinaryOperator.GT:
            return BoolVal(a > b)
        if op is BinaryOperator.LE:
            return BoolVal(a <= b)
        return BoolVal(a >= b)

    def contains(self, op: BinaryOperator, item: Value, collection: Value,
                 item_span: Span, collection_span: Span) -> bool:
        if isinstance(collection, ListVal):
            return any(values_equal(item, element) for element in collection.items)
        if isinstance(collection, DictVal):
            if not isinstance(item, StrVal):
                raise invalid_key_type(type_name(item), item_span)
            return item.value in collection
        raise invalid_membership(op.value, type_name(collection), collection_span)

    def check_nesting(self, value: Value, span: Span) -> Value:
        # Variables let a program wrap a list in another one without limit
        if value.depth > MAX_VALUE_DEPTH:
            raise value_too_deep(MAX_VALUE_DEPTH, span)
        return value

    def index_value(self, target: Value, index: Value, node: Index) -> Value:
        if isinstance(target, ListVal):
            if not isinstance(index, IntVal):
                raise invalid_index_type(type_name(index), node.index.span)
            length = len(target.items)
            if not 0 <= index.value < length:
                raise index_out_of_bounds(index.value, length, node.target.span, node.index.span)
            return target.items[index.value]
        if isinstance(target, DictVal):
            if not isinstance(index, StrVal):
                raise invalid_key_type(type_name(index), node.index.span)
            value = target.get(index.value)
            if value is None:
                raise key_not_found(index.value, node.index.span, target.keys())
            return value
        raise not_indexable(type_name(target), node.target.span)

    ###########################################################################
    # Calls
    ###########################################################################

    def call_function(self, node: Call) -> Value:
        signature = self.functions.get(node.name)
        if signature is None:
            raise undefined_function(node.name, node.name_span, self.functions.keys())
        # Arguments are evaluated in source order before binding
        positional = [Argument(self.evaluate(arg), arg.span, i + 1)
                      for i, arg in enumerate(node.args)]
        keywords = [(kw.name, kw.name_span, Argument(self.evaluate(kw.value), kw.value.span,
                                                     len(node.args) + j + 1))
                    for j, kw in enumerate(node.kwargs)]
        bound = bind_arguments(signature, positional, keywords, node.span)
        if self.debug_level >= 2:
            parts = [f"{name}={to_display(arg.value)}" for name, arg in bound.fixed.items()]
            parts.extend(to_display(arg.value) for arg in bound.rest)
            self.debug(f"call {node.name}({', '.join(parts)})", 2)
        return signature.impl(bound)


def evaluate(statements: List[Stmt], environment: Environment) -> Optional[Value]:
    """Run `statements` against `environment` with the standard built-ins.

    Returns the last statement's value, or None when it was an assignment.
    """
    with Interpreter(environment=environment) as interpreter:
        return interpreter.execute(statements)


def run_source(source: str, interpreter: Optional[Interpreter] = None) -> Optional[Value]:
    """Lex, parse and execute `source`, returning the final value."""
    if interpreter is None:
        interpreter = Interpreter()
    return interpreter.execute(parse(tokenize(source)))

