from glint.__main__ import main


def test_program_6_call_arguments(capsys):
    status = main(['examples/program_6.glint'])
    out = capsys.readouterr().out.strip()
    assert status == 0
    assert out == '16'
