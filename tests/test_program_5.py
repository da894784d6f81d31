from glint.__main__ import main


def test_program_5_compound_assignment(capsys):
    status = main(['examples/program_5.glint'])
    out = capsys.readouterr().out.strip()
    assert status == 0
    assert out == '7.0'
