import json
from io import StringIO

import pytest

from espanolscript.__main__ import main, run_interactive


def write_program(tmp_path, source, name='prog.es'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_run_file(tmp_path, capsys):
    path = write_program(tmp_path, 'entero x = 2;\nimprimir "x = " + x * 21;\n')
    main([str(path)])
    assert capsys.readouterr().out.strip() == 'x = 42'


def test_emit_then_run_ast(tmp_path, capsys):
    path = write_program(tmp_path, 'imprimir "desde json";')
    main(['--emit-ast', str(path)])
    ast_path = tmp_path / 'prog.es.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    assert json.loads(ast_path.read_text(encoding='utf-8'))['type'] == 'Program'

    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out.strip() == 'desde json'


def test_runtime_error_exits_with_status_1(tmp_path, capsys):
    path = write_program(tmp_path, 'imprimir "antes";\nimprimir 1 / 0;\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out.strip() == 'antes'
    assert 'Error de ejecución: línea 2' in captured.err


def test_syntax_error_exits_with_status_1(tmp_path, capsys):
    path = write_program(tmp_path, 'imprimir ;')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    assert 'Error de sintaxis' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'no_existe.es')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_verbose_writes_debug_file(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write_program(tmp_path, 'entero x = 1;')
    main(['-vv', str(path)])
    assert 'declare entero x = 1' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


def test_interactive_debug_trace_keeps_every_line(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'debug.txt').write_text('sesion anterior\n', encoding='utf-8')
    run_interactive(StringIO('entero a = 1;\nentero b = 2;\nsalir\n'), debug_level=2)
    trace = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'declare entero a = 1' in trace
    assert 'declare entero b = 2' in trace
    assert 'sesion anterior' not in trace


@pytest.mark.parametrize('content', [
    '{"type": "Program", "body": [',
    '{"type": "Goto", "label": "fin"}',
    '{"type": "Program", "cuerpo": []}',
    '[]',
])
def test_broken_ast_file_exits_with_status_1(tmp_path, capsys, content):
    path = write_program(tmp_path, content, name='roto.ast.json')
    with pytest.raises(SystemExit) as excinfo:
        main(['--ast', str(path)])
    assert excinfo.value.code == 1
    assert 'AST inválido' in capsys.readouterr().err


def test_interactive_lines_are_independent(capsys):
    stdin = StringIO('entero x = 1; imprimir x;\n\nimprimir x;\nimprimir "hola";\nsalir\nimprimir "nunca";\n')
    run_interactive(stdin)
    captured = capsys.readouterr()
    out = captured.out
    assert out.startswith('EspañolScript - modo interactivo\n')
    assert '1\n' in out
    assert 'hola\n' in out
    assert 'nunca' not in out
    assert out.rstrip().endswith('¡Hasta luego!')
    # x does not survive into the next line
    assert "Error: línea 1" in captured.err
    assert "'x' no está declarada" in captured.err


def test_interactive_ends_at_end_of_input(capsys):
    run_interactive(StringIO('imprimir 3;'))
    out = capsys.readouterr().out
    assert '3\n' in out
    assert out.rstrip().endswith('¡Hasta luego!')
