from glint.__main__ import main


def test_program_8_short_circuit(capsys):
    status = main(['examples/program_8.glint'])
    captured = capsys.readouterr()
    assert status == 0
    assert captured.out.strip() == '"default"'
    assert captured.err == ''
