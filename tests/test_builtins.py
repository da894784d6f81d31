import pytest

from glint.builtin_function import Argument, FunctionSignature, bind_arguments
from glint.errors import ErrorKind, EvaluationError
from glint.interpreter import run_source
from glint.span import Span
from glint.std import populate_standard_functions
from glint.std.math.basic_math import BasicMath
from glint.types import FloatVal, INT_MAX, IntVal, StrVal


def call_error(source):
    with pytest.raises(EvaluationError) as info:
        run_source(source)
    return info.value


def test_registry_is_read_only():
    functions = populate_standard_functions()
    assert sorted(functions) == ['len', 'max', 'min', 'product', 'sum']
    with pytest.raises(TypeError):
        functions['abs'] = functions['max']


@pytest.mark.parametrize("source", ["max(5, 10)", "max(a = 5, b = 10)", "max(5, b = 10)",
                                    "max(b = 10, a = 5)"])
def test_max_binding_forms(source):
    assert run_source(source) == IntVal(10)


def test_min_and_max_keep_the_winning_value():
    assert run_source("min(2.5, 7)") == FloatVal(2.5)
    assert run_source("max(3, 1.5)") == IntVal(3)
    # ties return the first argument unchanged
    assert run_source("max(2, 2.0)") == IntVal(2)
    assert run_source("min(2.0, 2)") == FloatVal(2.0)


def test_unknown_keyword():
    source = "max(x = 5, y = 10)"
    err = call_error(source)
    assert err.kind is ErrorKind.UNKNOWN_ARGUMENT
    assert err.span.text(source) == "x"
    assert err.diagnostic.data['valid'] == ['a', 'b']
    assert "a, b" in err.diagnostic.help_text


def test_duplicate_argument_points_at_both_places():
    source = "max(5, a = 10)"
    err = call_error(source)
    assert err.kind is ErrorKind.DUPLICATE_ARGUMENT
    assert err.span.text(source) == "a"
    assert err.diagnostic.secondary_spans[0].text(source) == "5"


def test_missing_argument():
    source = "max(b = 1)"
    err = call_error(source)
    assert err.kind is ErrorKind.WRONG_ARGUMENT_COUNT
    assert err.diagnostic.data['missing'] == ['a']
    assert err.span == Span(0, len(source))


@pytest.mark.parametrize("source,actual", [("max(1)", 1), ("max(1, 2, 3)", 3), ("min()", 0)])
def test_wrong_argument_count(source, actual):
    err = call_error(source)
    assert err.kind is ErrorKind.WRONG_ARGUMENT_COUNT
    assert err.diagnostic.data['actual'] == actual
    assert err.diagnostic.data['expected'] == '2 arguments'


def test_argument_type_error_names_position_and_parameter():
    source = 'max(1, "two")'
    err = call_error(source)
    assert err.kind is ErrorKind.ARGUMENT_TYPE_ERROR
    assert err.span.text(source) == '"two"'
    data = err.diagnostic.data
    assert (data['position'], data['parameter'], data['actual']) == (2, 'b', 'string')
    assert '"two"' in err.diagnostic.message


def test_keyword_argument_position_counts_from_call_order():
    err = call_error('min(1, b = true)')
    assert err.diagnostic.data['position'] == 2
    assert err.diagnostic.data['parameter'] == 'b'


@pytest.mark.parametrize(
    "source,expected",
    [
        ("sum(1, 2, 3)", IntVal(6)),
        ("sum(1, 2.5)", FloatVal(3.5)),
        ("sum(7)", IntVal(7)),
        ("product(2, 3, 4)", IntVal(24)),
        ("product(2, 0.5)", FloatVal(1.0)),
        ("sum(values = 4)", IntVal(4)),
    ],
)
def test_variadic_builtins(source, expected):
    assert run_source(source) == expected


@pytest.mark.parametrize("source", ["sum()", "product()"])
def test_variadic_builtins_need_one_value(source):
    err = call_error(source)
    assert err.kind is ErrorKind.WRONG_ARGUMENT_COUNT
    assert err.diagnostic.data['expected'] == 'at least 1 argument'


def test_variadic_type_error_reports_position():
    err = call_error('sum(1, 2, "3")')
    assert err.kind is ErrorKind.ARGUMENT_TYPE_ERROR
    assert err.diagnostic.data['position'] == 3
    assert err.diagnostic.data['parameter'] == 'values'


def test_sum_overflow():
    err = call_error(f"sum({INT_MAX}, 1)")
    assert err.kind is ErrorKind.INTEGER_OVERFLOW


@pytest.mark.parametrize(
    "source,expected",
    [('len([1, 2, 3])', 3), ('len({"a": 1})', 1), ('len("hello")', 5), ('len([])', 0)],
)
def test_len(source, expected):
    assert run_source(source) == IntVal(expected)


def test_len_rejects_numbers():
    err = call_error('len(5)')
    assert err.kind is ErrorKind.ARGUMENT_TYPE_ERROR
    assert err.diagnostic.data['parameter'] == 'collection'


def test_bind_arguments_directly():
    signature = FunctionSignature('pair', ('left', 'right'), lambda bound: StrVal(''))
    first = Argument(IntVal(1), Span(5, 6), 1)
    second = Argument(IntVal(2), Span(14, 15), 2)
    bound = bind_arguments(signature, [first], [('right', Span(8, 13), second)], Span(0, 16))
    assert bound['left'] == IntVal(1)
    assert bound.argument('right').parameter == 'right'
    assert bound.rest_values() == []


def test_signature_descriptions():
    functions = populate_standard_functions()
    assert functions['max'].usage() == 'max(a, b)'
    assert functions['sum'].usage() == 'sum(*values)'
    assert functions['len'].describe_arity() == '1 argument'
    assert repr(functions['min']) == '<builtin min>'


def test_basic_math_helpers():
    basic_math = BasicMath()
    assert basic_math.larger(1, 2) == 2
    assert basic_math.smaller(1, 2) == 1
    assert basic_math.total([1, 2, 3]) == 6
    assert isinstance(basic_math.total([1, 2.0]), float)
    assert basic_math.product([]) == 1
