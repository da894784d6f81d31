import pytest

from glint.environment import Environment
from glint.types import (
    BoolVal,
    DictVal,
    FloatVal,
    IntVal,
    ListVal,
    StrVal,
    format_float,
    from_python,
    nesting_depth,
    is_truthy,
    to_display,
    to_python,
    type_name,
    values_equal,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (IntVal(42), '42'),
        (IntVal(-7), '-7'),
        (FloatVal(2.5), '2.5'),
        (FloatVal(5.0), '5.0'),
        (FloatVal(1e20), '100000000000000000000.0'),
        (FloatVal(1.5e-7), '0.00000015'),
        (BoolVal(True), 'true'),
        (StrVal('Hello, World!'), '"Hello, World!"'),
        (StrVal('say "hi"\n'), '"say \\"hi\\"\\n"'),
        (ListVal((IntVal(1), StrVal('a'))), '[1, "a"]'),
        (ListVal(), '[]'),
        (DictVal((('b', IntVal(1)), ('a', ListVal()))), '{"b": 1, "a": []}'),
    ],
)
def test_to_display(value, expected):
    assert to_display(value) == expected


def test_format_float_keeps_a_decimal_point():
    assert format_float(3.0) == '3.0'
    assert format_float(0.1) == '0.1'
    assert format_float(-2e16) == '-20000000000000000.0'


@pytest.mark.parametrize(
    "value,name",
    [(IntVal(1), 'integer'), (FloatVal(1.0), 'float'), (BoolVal(False), 'boolean'),
     (StrVal(''), 'string'), (ListVal(), 'list'), (DictVal(), 'dictionary')],
)
def test_type_name(value, name):
    assert type_name(value) == name


@pytest.mark.parametrize(
    "value,truthy",
    [
        (BoolVal(False), False), (IntVal(0), False), (FloatVal(0.0), False),
        (StrVal(''), False), (ListVal(), False), (DictVal(), False),
        (IntVal(-1), True), (StrVal('0'), True), (ListVal((BoolVal(False),)), True),
    ],
)
def test_truthiness(value, truthy):
    assert is_truthy(value) is truthy


def test_structural_equality():
    assert values_equal(IntVal(1), FloatVal(1.0))
    assert not values_equal(BoolVal(True), IntVal(1))
    assert not values_equal(StrVal('1'), IntVal(1))
    assert values_equal(ListVal((IntVal(1),)), ListVal((FloatVal(1.0),)))
    assert not values_equal(ListVal(), DictVal())
    a = DictVal((('x', IntVal(1)), ('y', IntVal(2))))
    b = DictVal((('y', IntVal(2)), ('x', IntVal(1))))
    assert values_equal(a, b)
    assert not values_equal(a, DictVal((('x', IntVal(1)),)))


def test_helpers_reject_foreign_objects():
    with pytest.raises(TypeError):
        type_name(3)
    with pytest.raises(TypeError):
        is_truthy(None)
    with pytest.raises(TypeError):
        values_equal(IntVal(1), 'one')


def test_dictionary_from_pairs():
    d = DictVal.from_pairs([('a', IntVal(1)), ('b', IntVal(2)), ('a', IntVal(3))])
    assert d.keys() == ('a', 'b')
    assert d.get('a') == IntVal(3)
    assert d.get('zzz') is None
    assert 'b' in d
    assert len(d) == 2


def test_python_conversion():
    value = from_python({'n': 1, 'f': 2.5, 'ok': True, 'items': [1, 'two']})
    assert value == DictVal((
        ('n', IntVal(1)),
        ('f', FloatVal(2.5)),
        ('ok', BoolVal(True)),
        ('items', ListVal((IntVal(1), StrVal('two')))),
    ))
    assert to_python(value) == {'n': 1, 'f': 2.5, 'ok': True, 'items': [1, 'two']}


def test_from_python_rejects_unsupported():
    with pytest.raises(TypeError):
        from_python(None)
    with pytest.raises(TypeError):
        from_python({1: 'a'})


def test_environment():
    env = Environment()
    assert env.get('x') is None
    env.set('x', IntVal(1))
    env.set('a', StrVal('s'))
    assert 'x' in env
    assert env.contains('a')
    assert env.names() == ['a', 'x']
    assert len(env) == 2
    assert repr(env) == 'Environment(a, x)'
    env.clear()
    assert len(env) == 0


def test_nesting_depth():
    assert nesting_depth(IntVal(1)) == 0
    assert nesting_depth(ListVal()) == 1
    assert nesting_depth(DictVal((('a', ListVal((IntVal(1),))),))) == 2
    inner = ListVal((ListVal(), DictVal((('k', ListVal((ListVal(),))),))))
    assert inner.depth == 4
    # depth is neither compared nor shown
    assert ListVal((IntVal(1),)) == ListVal((IntVal(1),))
    assert 'depth' not in repr(ListVal())


def test_display_of_deep_list():
    value = ListVal()
    for _ in range(99):
        value = ListVal((value,))
    assert to_display(value) == '[' * 100 + ']' * 100
    assert values_equal(value, ListVal(value.items))
