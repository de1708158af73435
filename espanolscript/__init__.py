# EspañolScript language package
# This package provides a parser and a tree-walking interpreter for EspañolScript.
from .interpreter import run_program, run_file, Interpreter
from .parser import parse_program
from .errors import EspanolScriptError, ParseError
from .std.io import BasicIO

__all__ = [
    'run_program',
    'run_file',
    'parse_program',
    'Interpreter',
    'BasicIO',
    'EspanolScriptError',
    'ParseError',
]
