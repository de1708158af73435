from pathlib import Path

import pytest

from espanolscript.errors import DivisionByZeroError
from espanolscript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_programa_11_division_por_cero(capsys):
    with open(EXAMPLES / 'programa_11.es', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    with pytest.raises(DivisionByZeroError) as excinfo:
        interp.run(ast)
    # output written before the error is kept
    out = capsys.readouterr().out.strip()
    assert out == 'antes'
    assert excinfo.value.line == 3
    assert str(excinfo.value).startswith('línea 3')
