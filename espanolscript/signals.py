"""Control-flow signals produced by statement execution.

Every call to `Interpreter.execute` returns one of these. Blocks forward
anything that is not `NORMAL`, loops consume `BREAK` and `CONTINUE`, and a
function call turns a `ReturnSignal` into the call's value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .types import Value


@dataclass(frozen=True)
class NormalSignal:
    pass


@dataclass(frozen=True)
class ReturnSignal:
    value: Optional[Value] = None


@dataclass(frozen=True)
class BreakSignal:
    pass


@dataclass(frozen=True)
class ContinueSignal:
    pass


NORMAL = NormalSignal()
BREAK = BreakSignal()
CONTINUE = ContinueSignal()

Signal = Union[NormalSignal, ReturnSignal, BreakSignal, ContinueSignal]
