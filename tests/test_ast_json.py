import json

import pytest

from glint.ast import BinaryOperator
from glint.ast_json import (
    ast_from_obj,
    ast_to_obj,
    statements_from_json_obj,
    statements_to_json_obj,
)
from glint.interpreter import Interpreter
from glint.parser import parse_source
from glint.types import IntVal

PROGRAM = '''
prices = {"apple": 1.25, "pear": 2}
basket = ["apple", "pear", "apple"]
total = 0
total += prices[basket[0]] * 2
label = "sum: " + "ok"
check = not (total > 10) and "pear" in prices
best = max(a = total, b = sum(1, 2, 3))
-best
'''


def test_binary_op_encoding():
    obj = ast_to_obj(parse_source('1 + x'))
    assert obj == [{
        "type": "ExprStmt",
        "span": [0, 5],
        "expr": {
            "type": "BinaryOp", "op": "+", "span": [0, 5], "op_span": [2, 3],
            "left": {"type": "IntLiteral", "value": 1, "span": [0, 1]},
            "right": {"type": "Identifier", "name": "x", "span": [4, 5]},
        },
    }]


def test_round_trip_through_json_text():
    statements = parse_source(PROGRAM)
    text = json.dumps(statements_to_json_obj(statements, PROGRAM))
    data = json.loads(text)
    assert data["type"] == "Program"
    assert data["source"] == PROGRAM
    assert statements_from_json_obj(data) == statements


def test_whole_float_literal_survives():
    statements = parse_source('x = 2.0')
    data = json.loads(json.dumps(ast_to_obj(statements)))
    data[0]["value"]["value"] = 2
    assert ast_from_obj(data) == statements


def test_bare_statement_list_is_accepted():
    statements = parse_source('a = 1; a')
    assert statements_from_json_obj(ast_to_obj(statements)) == statements


def test_loaded_tree_runs():
    statements = statements_from_json_obj(json.loads(json.dumps(statements_to_json_obj(parse_source(PROGRAM)))))
    interpreter = Interpreter()
    result = interpreter.execute(statements)
    assert result == IntVal(-6)
    assert interpreter.environment.get('total').value == 2.5


def test_operators_are_stored_by_symbol():
    obj = ast_to_obj(parse_source('k not in d'))
    assert obj[0]["expr"]["op"] == BinaryOperator.NOT_IN.value == 'not in'


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({"type": "While"})
    with pytest.raises(TypeError):
        ast_from_obj("x")
    with pytest.raises(TypeError):
        ast_to_obj(object())
