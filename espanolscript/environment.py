from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .errors import DuplicateDeclarationError, UndeclaredNameError
from .types import NULL, Value, conform


@dataclass
class Variable:
    """A declared variable: its type name, current value and whether it was ever set."""
    type_name: str
    value: Value = NULL
    initialized: bool = False


class Environment:
    """Global bindings plus a stack of block and call scopes.

    Lookups walk the open scopes from the innermost outwards and fall back
    to the global frame. Declarations always land in the innermost open
    scope, or in the global frame when no scope is open.
    """
    def __init__(self):
        self.globals: Dict[str, Variable] = {}
        self.frames: List[Dict[str, Variable]] = []

    @property
    def depth(self) -> int:
        return len(self.frames)

    def current_frame(self) -> Dict[str, Variable]:
        return self.frames[-1] if self.frames else self.globals

    def open_scope(self) -> None:
        self.frames.append({})

    def close_scope(self) -> None:
        if self.frames:
            self.frames.pop()

    @contextmanager
    def scope(self) -> Iterator[Dict[str, Variable]]:
        self.open_scope()
        try:
            yield self.frames[-1]
        finally:
            self.close_scope()

    def declare(self, name: str, type_name: str, value: Optional[Value] = None) -> Variable:
        frame = self.current_frame()
        if name in frame:
            raise DuplicateDeclarationError(f"Variable '{name}' ya está declarada")
        if value is None:
            variable = Variable(type_name)
        else:
            # an unknown type name is accepted here and only fails once a value is checked
            variable = Variable(type_name, conform(type_name, value, f"variable '{name}'"), True)
        frame[name] = variable
        return variable

    def lookup(self, name: str) -> Variable:
        for frame in reversed(self.frames):
            if name in frame:
                return frame[name]
        if name in self.globals:
            return self.globals[name]
        raise UndeclaredNameError(f"Variable '{name}' no está declarada")

    def assign(self, name: str, value: Value) -> Value:
        variable = self.lookup(name)
        variable.value = conform(variable.type_name, value, f"asignación a '{name}'")
        variable.initialized = True
        return variable.value
