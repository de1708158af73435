"""CLI entry point for the EspañolScript interpreter.

Usage:
    python -m espanolscript [-v|-vv|-vvv] <programa.es>
    python -m espanolscript [-v...] --emit-ast <programa.es>
    python -m espanolscript [-v...] --ast <ast_json_file>
    python -m espanolscript [-v...] --interactivo

Options:
  -v             Increase debug verbosity (can be repeated)
  --emit-ast     Parse the given .es file and emit an AST JSON file
  --ast          Execute a previously emitted AST JSON file
  -i, --interactivo
                 Read lines from standard input and run each one as an
                 independent program; type 'salir' to leave

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Any parse or runtime error aborts the run,
is reported on standard error and exits with status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, TextIO

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import EspanolScriptError
from .interpreter import Interpreter
from .parser import parse_program
from .std.io import BasicIO

DEBUG_FILE = 'debug.txt'


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def run_interactive(stdin: Optional[TextIO] = None, debug_level: int = 0) -> None:
    """Run each entered line as a complete program with a fresh interpreter.

    No state survives from one line to the next. Errors are reported and
    the loop continues; 'salir' or end of input ends the session.
    """
    stdin = stdin if stdin is not None else sys.stdin
    if debug_level > 0:
        # one trace for the whole session; each line's interpreter appends to it
        open(DEBUG_FILE, 'w', encoding='utf-8').close()
    print("EspañolScript - modo interactivo")
    print("Escribe 'salir' para terminar")
    while True:
        print(">>> ", end='', flush=True)
        line = stdin.readline()
        if not line or line.strip() == 'salir':
            print("¡Hasta luego!")
            return
        if not line.strip():
            continue
        try:
            interpreter = Interpreter(io=BasicIO(input_stream=stdin), debug_level=debug_level,
                                      debug_file=DEBUG_FILE, debug_append=True)
            interpreter.run(parse_program(line))
        except EspanolScriptError as e:
            print(f"Error: {e}", file=sys.stderr)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(prog='espanolscript', description="EspañolScript interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='ES_FILE', help='emit AST JSON for the given .es file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('-i', '--interactivo', action='store_true', help='run lines typed on standard input')
    parser.add_argument('program', nargs='?', help='EspañolScript program file (.es) to execute')
    args = parser.parse_args(argv)

    if args.interactivo:
        run_interactive(debug_level=args.v)
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            ast_program = parse_program(source)
        except EspanolScriptError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        try:
            # JSONDecodeError is a ValueError; bad node fields surface as TypeError
            ast_program = ast_from_obj(json.loads(read_source(ast_path)))
            if not isinstance(ast_program, Program):
                raise TypeError("el nodo raíz debe ser Program")
        except (ValueError, TypeError) as e:
            print(f"Error: AST inválido en {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        if not args.program:
            parser.error('missing program file; or use --emit-ast/--ast/--interactivo')
        try:
            ast_program = parse_program(read_source(Path(args.program)))
        except EspanolScriptError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    interpreter = Interpreter(debug_level=args.v, debug_file=DEBUG_FILE)
    try:
        interpreter.run(ast_program)
    except EspanolScriptError as e:
        print(f"Error de ejecución: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
