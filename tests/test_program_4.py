from glint.__main__ import main


def test_program_4_nested_collections(capsys):
    status = main(['examples/program_4.glint'])
    out = capsys.readouterr().out.strip()
    assert status == 0
    assert out == '22'
