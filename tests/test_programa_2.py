from pathlib import Path
from espanolscript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_programa_2_factorial(capsys):
    with open(EXAMPLES / 'programa_2.es', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == 'factorial(5) = 120'
