"""JSON serialization/deserialization for the Glint AST.

This module converts between Glint AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node keeps its spans
and operators, so `ast_from_obj(ast_to_obj(tree)) == tree` for any tree the
parser produces.

Example encoding of `1 + x`:

    {"type": "BinaryOp", "op": "+", "span": [0, 5], "op_span": [2, 3],
     "left": {"type": "IntLiteral", "value": 1, "span": [0, 1]},
     "right": {"type": "Identifier", "name": "x", "span": [4, 5]}}
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .ast import (
    Assign,
    BinaryOp,
    BinaryOperator,
    BoolLiteral,
    Call,
    CompoundAssign,
    CompoundOperator,
    DictEntry,
    DictLiteral,
    ExprStmt,
    FloatLiteral,
    Identifier,
    Index,
    IntLiteral,
    KeywordArg,
    ListLiteral,
    StrLiteral,
    UnaryOp,
    UnaryOperator,
    expression_depth,
)
from .parser import MAX_EXPRESSION_DEPTH
from .span import Span


def span_to_obj(span: Span) -> List[int]:
    return [span.start, span.end]


def span_from_obj(o: List[int]) -> Span:
    start, end = o
    return Span(start, end)


def ast_to_obj(node: Any) -> Any:
    # A program is a list of statements
    if isinstance(node, (list, tuple)):
        return [ast_to_obj(n) for n in node]

    if isinstance(node, (IntLiteral, FloatLiteral, BoolLiteral, StrLiteral)):
        return {"type": type(node).__name__, "value": node.value, "span": span_to_obj(node.span)}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name, "span": span_to_obj(node.span)}
    if isinstance(node, BinaryOp):
        return {
            "type": "BinaryOp",
            "op": node.op.value,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            "op_span": span_to_obj(node.op_span),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, UnaryOp):
        return {
            "type": "UnaryOp",
            "op": node.op.value,
            "operand": ast_to_obj(node.operand),
            "op_span": span_to_obj(node.op_span),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, Call):
        return {
            "type": "Call",
            "name": node.name,
            "name_span": span_to_obj(node.name_span),
            "args": [ast_to_obj(a) for a in node.args],
            "kwargs": [
                {"name": kw.name, "name_span": span_to_obj(kw.name_span), "value": ast_to_obj(kw.value)}
                for kw in node.kwargs
            ],
            "span": span_to_obj(node.span),
        }
    if isinstance(node, ListLiteral):
        return {"type": "ListLiteral", "elements": [ast_to_obj(e) for e in node.elements],
                "span": span_to_obj(node.span)}
    if isinstance(node, DictLiteral):
        return {
            "type": "DictLiteral",
            "entries": [
                {"key": e.key, "key_span": span_to_obj(e.key_span), "value": ast_to_obj(e.value)}
                for e in node.entries
            ],
            "span": span_to_obj(node.span),
        }
    if isinstance(node, Index):
        return {"type": "Index", "target": ast_to_obj(node.target), "index": ast_to_obj(node.index),
                "span": span_to_obj(node.span)}

    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr), "span": span_to_obj(node.span)}
    if isinstance(node, Assign):
        return {
            "type": "Assign",
            "name": node.name,
            "name_span": span_to_obj(node.name_span),
            "value": ast_to_obj(node.value),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, CompoundAssign):
        return {
            "type": "CompoundAssign",
            "name": node.name,
            "name_span": span_to_obj(node.name_span),
            "op": node.op.value,
            "op_span": span_to_obj(node.op_span),
            "value": ast_to_obj(node.value),
            "span": span_to_obj(node.span),
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


LITERALS = {
    "IntLiteral": (IntLiteral, int),
    "FloatLiteral": (FloatLiteral, float),
    "BoolLiteral": (BoolLiteral, bool),
    "StrLiteral": (StrLiteral, str),
}


def ast_from_obj(obj: Any) -> Any:
    if isinstance(obj, list):
        return [ast_from_obj(n) for n in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t in LITERALS:
        cls, python_type = LITERALS[t]
        # JSON has no separate float type; 2.0 may come back as 2
        return cls(python_type(obj["value"]), span_from_obj(obj["span"]))
    if t == "Identifier":
        return Identifier(obj["name"], span_from_obj(obj["span"]))
    if t == "BinaryOp":
        return BinaryOp(
            op=BinaryOperator(obj["op"]),
            left=ast_from_obj(obj["left"]),
            right=ast_from_obj(obj["right"]),
            op_span=span_from_obj(obj["op_span"]),
            span=span_from_obj(obj["span"]),
        )
    if t == "UnaryOp":
        return UnaryOp(
            op=UnaryOperator(obj["op"]),
            operand=ast_from_obj(obj["operand"]),
            op_span=span_from_obj(obj["op_span"]),
            span=span_from_obj(obj["span"]),
        )
    if t == "Call":
        return Call(
            name=obj["name"],
            name_span=span_from_obj(obj["name_span"]),
            args=tuple(ast_from_obj(a) for a in obj["args"]),
            kwargs=tuple(
                KeywordArg(kw["name"], span_from_obj(kw["name_span"]), ast_from_obj(kw["value"]))
                for kw in obj["kwargs"]
            ),
            span=span_from_obj(obj["span"]),
        )
    if t == "ListLiteral":
        return ListLiteral(tuple(ast_from_obj(e) for e in obj["elements"]), span_from_obj(obj["span"]))
    if t == "DictLiteral":
        entries = tuple(
            DictEntry(e["key"], span_from_obj(e["key_span"]), ast_from_obj(e["value"]))
            for e in obj["entries"]
        )
        return DictLiteral(entries, span_from_obj(obj["span"]))
    if t == "Index":
        return Index(ast_from_obj(obj["target"]), ast_from_obj(obj["index"]), span_from_obj(obj["span"]))
    if t == "ExprStmt":
        return ExprStmt(ast_from_obj(obj["expr"]), span_from_obj(obj["span"]))
    if t == "Assign":
        return Assign(
            name=obj["name"],
            name_span=span_from_obj(obj["name_span"]),
            value=ast_from_obj(obj["value"]),
            span=span_from_obj(obj["span"]),
        )
    if t == "CompoundAssign":
        return CompoundAssign(
            name=obj["name"],
            name_span=span_from_obj(obj["name_span"]),
            op=CompoundOperator(obj["op"]),
            op_span=span_from_obj(obj["op_span"]),
            value=ast_from_obj(obj["value"]),
            span=span_from_obj(obj["span"]),
        )

    raise ValueError(f"Unknown AST node type: {t}")


def statements_to_json_obj(statements: List[Any], source: Optional[str] = None) -> Dict[str, Any]:
    """Top-level document written by `--emit-ast`.

    The source text is kept alongside the tree so that errors raised while
    running the AST later can still be rendered against it.
    """
    obj: Dict[str, Any] = {"type": "Program", "body": ast_to_obj(statements)}
    if source is not None:
        obj["source"] = source
    return obj


def statements_from_json_obj(obj: Any) -> List[Any]:
    """Accept either a `Program` document or a bare statement list."""
    if isinstance(obj, dict) and obj.get("type") == "Program":
        obj = obj["body"]
    if not isinstance(obj, list):
        raise TypeError("AST document must hold a list of statements")
    statements = ast_from_obj(obj)
    for stmt in statements:
        if not isinstance(stmt, (ExprStmt, Assign, CompoundAssign)):
            raise TypeError(f"expected a statement, got {type(stmt).__name__}")
        expr = stmt.expr if isinstance(stmt, ExprStmt) else stmt.value
        if expression_depth(expr) > MAX_EXPRESSION_DEPTH:
            raise ValueError(f"expression at {stmt.span!r} is nested more than "
                             f"{MAX_EXPRESSION_DEPTH} levels deep")
    return statements
