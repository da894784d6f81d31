from glint.__main__ import main


def test_program_10_division_by_zero(capsys):
    status = main(['examples/program_10.glint'])
    err = capsys.readouterr().err
    assert status == 1
    lines = err.splitlines()
    assert lines[0] == 'error[E0601]: Runtime error: division by zero'
    assert lines[1] == ' --> examples/program_10.glint:2:12'
    assert '2 | ratio = 10 / (width - 5)' in lines
    assert '  |            ^ division by zero occurs here' in lines
    assert '  |               --------- divisor evaluates to zero' in lines
    assert '  = help: check the divisor value before dividing' in lines
