from pathlib import Path
from espanolscript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_programa_7_sombreado(capsys):
    with open(EXAMPLES / 'programa_7.es', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # the inner assignment hits the nearest x; the global x is untouched
    assert out_lines == ['2', '3', '1']
