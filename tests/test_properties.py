from hypothesis import given, strategies as st

from glint.errors import GlintError
from glint.interpreter import run_source
from glint.lexer import TokenKind, tokenize
from glint.parser import parse_source
from glint.suggest import edit_distance, suggest
from glint.types import (
    BoolVal,
    DictVal,
    FloatVal,
    INT_MAX,
    INT_MIN,
    IntVal,
    ListVal,
    StrVal,
    to_display,
)

# -------------------------------
# Strategies
# -------------------------------
scalar_strat = st.one_of(
    # INT_MIN has no literal form; it only arises from arithmetic
    st.integers(min_value=INT_MIN + 1, max_value=INT_MAX).map(IntVal),
    st.floats(allow_nan=False, allow_infinity=False).map(FloatVal),
    st.booleans().map(BoolVal),
    st.text(max_size=20).map(StrVal),
)

value_strat = st.recursive(
    scalar_strat,
    lambda children: st.one_of(
        st.lists(children, max_size=4).map(lambda items: ListVal(tuple(items))),
        st.dictionaries(st.text(max_size=8), children, max_size=4).map(
            lambda d: DictVal(tuple(d.items()))),
    ),
    max_leaves=12,
)

source_strat = st.text(
    alphabet='0123456789.+-*/()[]{},:;=<>"# \nabeimnostuxy_',
    max_size=400,
)


# -------------------------------
# Hypothesis tests
# -------------------------------
@given(st.integers(min_value=0, max_value=INT_MAX))
def test_integer_literals_read_back(n):
    token = tokenize(str(n))[0]
    assert token.kind is TokenKind.INTEGER
    assert token.value == n


@given(value_strat)
def test_displayed_values_evaluate_to_themselves(value):
    assert run_source(to_display(value)) == value


@given(st.text(max_size=400))
def test_front_end_only_raises_glint_errors(source):
    try:
        parse_source(source)
    except GlintError:
        pass


@given(source_strat)
def test_evaluation_only_raises_glint_errors(source):
    try:
        run_source(source)
    except GlintError:
        pass


@given(st.text(max_size=40))
def test_token_spans_cover_their_text(source):
    try:
        tokens = tokenize(source)
    except GlintError:
        return
    previous_end = 0
    for token in tokens:
        assert previous_end <= token.span.start <= token.span.end <= len(source)
        previous_end = token.span.end


@given(st.text(alphabet='abcdxyz_', min_size=1, max_size=8),
       st.lists(st.text(alphabet='abcdxyz_', min_size=1, max_size=8), max_size=6))
def test_suggestions_are_close_and_sorted(name, candidates):
    found = suggest(name, candidates)
    distances = [edit_distance(name, c) for c in found]
    assert distances == sorted(distances)
    assert name not in found
    assert all(d <= 2 for d in distances)


@given(st.lists(st.sampled_from(['(', '[', '-', 'not ', 'f(', '{"k": ', 'x[']), max_size=300))
def test_any_nesting_depth_only_raises_glint_errors(openers):
    try:
        run_source(''.join(openers) + '1')
    except GlintError:
        pass
