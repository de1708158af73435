from typing import Optional


class EspanolScriptError(Exception):
    """Base class for errors raised while running an EspañolScript program.

    Errors are raised without a position deep inside the type model or the
    environment; the interpreter attaches the line and column of the
    innermost node that was executing when the error passed through it.
    """
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def locate(self, line: int, column: int) -> None:
        if self.line is None and line:
            self.line = line
            self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"línea {self.line}, columna {self.column}: {self.message}"


class ParseError(EspanolScriptError):
    """Syntax or lexical error reported by the parser."""


class DuplicateDeclarationError(EspanolScriptError):
    pass


class UndeclaredNameError(EspanolScriptError):
    pass


class UninitializedVariableError(EspanolScriptError):
    pass


class TypeMismatchError(EspanolScriptError):
    pass


class OperatorTypeError(EspanolScriptError):
    pass


class ArityError(EspanolScriptError):
    pass


class DivisionByZeroError(EspanolScriptError):
    pass


class RecursionDepthError(EspanolScriptError):
    """Raised when nested function calls exceed the interpreter's call depth."""
