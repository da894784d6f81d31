import pytest

from glint.diagnostics import format_diagnostic, render_diagnostic
from glint.errors import (
    Diagnostic,
    ErrorKind,
    Label,
    ParseError,
    key_not_found,
    undefined_variable,
    unexpected_eof,
)
from glint.parser import parse_source
from glint.span import Span, line_col
from glint.suggest import edit_distance, suggest


def test_render_single_line():
    source = '10 / 0'
    diag = Diagnostic(ErrorKind.DIVISION_BY_ZERO, 'division by zero', Span(3, 4),
                      label='division by zero occurs here',
                      secondary=(Label(Span(5, 6), 'divisor evaluates to zero'),),
                      help_text='check the divisor value before dividing')
    assert render_diagnostic(diag, source).splitlines() == [
        'error[E0601]: Runtime error: division by zero',
        ' --> <input>:1:4',
        '  |',
        '1 | 10 / 0',
        '  |    ^ division by zero occurs here',
        '  |      - divisor evaluates to zero',
        '  |',
        '  = help: check the divisor value before dividing',
    ]


def test_render_suggestion_and_filename():
    source = 'xs = [1]\nxsz'
    err = undefined_variable('xsz', Span(9, 12), ['xs'])
    text = render_diagnostic(err.diagnostic, source, 'prog.glint')
    lines = text.splitlines()
    assert lines[1] == ' --> prog.glint:2:1'
    assert '2 | xsz' in lines
    assert '  | ^^^ not defined' in lines
    assert lines[-1] == "  = help: did you mean 'xs'?"


def test_zero_width_span_gets_one_caret():
    source = '1 +'
    err = unexpected_eof(Span(3, 3), ['expression'])
    lines = render_diagnostic(err.diagnostic, source).splitlines()
    assert lines[1] == ' --> <input>:1:4'
    assert '  |    ^ expected more input here' in lines


def test_labels_on_separate_lines_are_elided_between():
    source = 'a = (\n1\n2\n3\n'
    diag = Diagnostic(ErrorKind.UNCLOSED_DELIMITER, "unclosed '('", Span(4, 5),
                      label="this '(' is never closed",
                      secondary=(Label(Span(12, 12), "expected ')'"),))
    lines = render_diagnostic(diag, source).splitlines()
    assert '1 | a = (' in lines
    assert '5 | ' in lines
    assert '  ...' in lines
    assert lines.index('  ...') < lines.index('5 | ')


def test_span_across_lines_underlines_each_line():
    source = 'ab\ncd'
    diag = Diagnostic(ErrorKind.TYPE_MISMATCH, 'bad', Span(1, 4), label='here')
    lines = render_diagnostic(diag, source).splitlines()
    assert '  |  ^' in lines
    assert '  | ^ here' in lines


def test_wide_gutter():
    source = '\n' * 11 + 'boom'
    diag = Diagnostic(ErrorKind.UNDEFINED_VARIABLE, "undefined variable 'boom'", Span(11, 15))
    lines = render_diagnostic(diag, source).splitlines()
    assert lines[1] == '  --> <input>:12:1'
    assert '12 | boom' in lines
    assert '   | ^^^^' in lines


def test_no_help_lines_when_nothing_to_say():
    diag = Diagnostic(ErrorKind.TYPE_MISMATCH, 'bad', Span(0, 1))
    assert '= help' not in render_diagnostic(diag, 'x')


def test_key_not_found_help_lists_keys():
    err = key_not_found('nme', Span(0, 5), ['name', 'age'])
    assert err.diagnostic.help_text == 'available keys: name, age'
    assert err.diagnostic.suggestions == ('name',)


def test_format_diagnostic():
    diag = Diagnostic(ErrorKind.KEY_NOT_FOUND, "key 'b' not found", Span(9, 12))
    assert format_diagnostic(diag) == "E0502 [9..12]: key 'b' not found"


def test_error_kinds_have_unique_codes():
    codes = [kind.code for kind in ErrorKind]
    assert len(codes) == len(set(codes))
    assert ErrorKind.UNEXPECTED_TOKEN.category == 'Syntax error'
    assert ErrorKind.INVALID_CHARACTER.stage == 'lex'


def test_with_help_and_label_return_copies():
    diag = Diagnostic(ErrorKind.TYPE_MISMATCH, 'bad', Span(0, 1))
    changed = diag.with_help('try again').with_label(Span(2, 3), 'other')
    assert diag.help_text is None
    assert changed.help_text == 'try again'
    assert changed.secondary_spans == (Span(2, 3),)


def test_line_col():
    source = 'ab\ncd\n'
    assert line_col(source, 0) == (1, 1)
    assert line_col(source, 4) == (2, 2)
    assert line_col(source, len(source)) == (3, 1)


def test_span_helpers():
    assert Span(2, 5).merge(Span(0, 3)) == Span(0, 5)
    assert len(Span.empty(4)) == 0
    assert Span.single(4) == Span(4, 5)
    assert repr(Span(1, 2)) == 'Span(1..2)'


def test_edit_distance():
    assert edit_distance('kitten', 'sitting') == 3
    assert edit_distance('', 'abc') == 3
    assert edit_distance('same', 'same') == 0


def test_suggest_orders_by_distance_then_name():
    assert suggest('totl', ['total', 'tool', 'count']) == ['tool', 'total']
    assert suggest('count', ['counts', 'amount']) == ['counts']


def test_suggest_ignores_distant_and_single_letter_names():
    assert suggest('x', ['y', 'z']) == []
    assert suggest('width', ['height']) == []
    assert suggest('value', ['value']) == []


def test_render_nesting_error_at_the_opener():
    source = 'x = ' + '[' * 60 + ']' * 60
    with pytest.raises(ParseError) as info:
        parse_source(source)
    lines = render_diagnostic(info.value.diagnostic, source, 'deep.glint').splitlines()
    assert lines[0] == 'error[E0204]: Syntax error: expression is nested more than 48 levels deep'
    assert lines[1] == ' --> deep.glint:1:53'
    assert lines[-1] == '  = help: split the expression into smaller assignments'
