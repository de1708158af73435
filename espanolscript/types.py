"""Type definitions and helpers for EspañolScript.

This module defines the runtime type system used by the interpreter: the
closed set of runtime values, the declared type names, and the rules that
move values between them. Declarations, assignments and argument binding
all go through `conform`, which applies `coerce` and then `compatible`.
Arithmetic helpers implement numeric promotion and fixed-width integer
behaviour so that the interpreter can stay focused on dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Type, Union
import math

from .errors import TypeMismatchError


INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1


class TypeName(str, Enum):
    """The declared type names accepted by the language."""
    ENTERO = 'entero'
    LARGO = 'largo'
    DECIMAL = 'decimal'
    BOOLEANO = 'booleano'
    CADENA = 'cadena'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntVal:
    """A 32-bit signed integer (`entero`)."""
    value: int


@dataclass(frozen=True)
class LongVal:
    """A 64-bit signed integer (`largo`)."""
    value: int


@dataclass(frozen=True)
class DecimalVal:
    """A 64-bit float (`decimal`)."""
    value: float


@dataclass(frozen=True)
class BoolVal:
    value: bool


@dataclass(frozen=True)
class TextVal:
    value: str


@dataclass(frozen=True)
class NullVal:
    """Marker for "no value": uninitialized variables and empty returns."""

    def __repr__(self) -> str:
        return 'null'


NULL = NullVal()
TRUE = BoolVal(True)
FALSE = BoolVal(False)

Value = Union[IntVal, LongVal, DecimalVal, BoolVal, TextVal, NullVal]
NumericVal = Union[IntVal, LongVal, DecimalVal]

VALUE_TYPES = {
    TypeName.ENTERO.value: IntVal,
    TypeName.LARGO.value: LongVal,
    TypeName.DECIMAL.value: DecimalVal,
    TypeName.BOOLEANO.value: BoolVal,
    TypeName.CADENA.value: TextVal,
}

_TYPE_NAMES = {cls: name for name, cls in VALUE_TYPES.items()}
_RANGES = {IntVal: (INT32_MIN, INT32_MAX), LongVal: (INT64_MIN, INT64_MAX)}


def is_numeric(value: Value) -> bool:
    return isinstance(value, (IntVal, LongVal, DecimalVal))


def type_name(value: Value) -> str:
    """Return the declared type word describing a runtime value."""
    if isinstance(value, NullVal):
        return 'null'
    return _TYPE_NAMES.get(type(value), type(value).__name__)


def wrap_int(value: int, cls: Type[Union[IntVal, LongVal]]) -> int:
    """Wrap an unbounded int to the two's-complement width of `cls`."""
    low, high = _RANGES[cls]
    span = high - low + 1
    return (value - low) % span + low


def integer_literal(value: int) -> Union[IntVal, LongVal]:
    """Type an integer literal: `entero` when it fits, `largo` otherwise."""
    if INT32_MIN <= value <= INT32_MAX:
        return IntVal(value)
    if INT64_MIN <= value <= INT64_MAX:
        return LongVal(value)
    raise TypeMismatchError(f"Literal entero fuera del rango de largo: {value}")


def float_to_integer(value: float, cls: Type[Union[IntVal, LongVal]]) -> int:
    """Truncate a float toward zero, refusing NaN, infinities and overflow."""
    target = _TYPE_NAMES[cls]
    if math.isnan(value) or math.isinf(value):
        raise TypeMismatchError(f"Valor decimal {format_decimal(value)} fuera del rango de {target}")
    result = math.trunc(value)
    low, high = _RANGES[cls]
    if not low <= result <= high:
        raise TypeMismatchError(f"Valor decimal {format_decimal(value)} fuera del rango de {target}")
    return result


def promote(left: NumericVal, right: NumericVal) -> Type[NumericVal]:
    """Select the result type of a binary arithmetic operation."""
    if isinstance(left, DecimalVal) or isinstance(right, DecimalVal):
        return DecimalVal
    if isinstance(left, LongVal) or isinstance(right, LongVal):
        return LongVal
    return IntVal


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def truncating_mod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    return a - b * truncating_div(a, b)


def float_pow(base: float, exponent: float) -> float:
    """IEEE-style power: overflow gives infinity, domain errors give NaN."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        odd = exponent.is_integer() and int(exponent) % 2 == 1
        return -math.inf if base < 0 and odd else math.inf
    except ValueError:
        # 0 to a negative power, or a negative base to a fractional power
        return math.inf if base == 0 else math.nan


def coerce(target: str, value: Value) -> Value:
    """Best-effort conversion of `value` toward the declared type `target`.

    Numeric values move freely between `entero`, `largo` and `decimal`
    (narrowing to `entero` only when in range). Booleans and text never
    convert. Anything that cannot be converted is returned unchanged and
    left for `compatible` to reject.
    """
    if isinstance(value, NullVal):
        return value
    if target == TypeName.ENTERO:
        if isinstance(value, LongVal):
            if not INT32_MIN <= value.value <= INT32_MAX:
                raise TypeMismatchError(f"Valor largo fuera del rango de entero: {value.value}")
            return IntVal(value.value)
        if isinstance(value, DecimalVal):
            return IntVal(float_to_integer(value.value, IntVal))
    elif target == TypeName.LARGO:
        if isinstance(value, IntVal):
            return LongVal(value.value)
        if isinstance(value, DecimalVal):
            return LongVal(float_to_integer(value.value, LongVal))
    elif target == TypeName.DECIMAL:
        if isinstance(value, (IntVal, LongVal)):
            return DecimalVal(float(value.value))
    return value


def compatible(target: str, value: Value) -> bool:
    """True when `value` already has the tag of `target`, or is null."""
    if isinstance(value, NullVal):
        return True
    expected: Optional[type] = VALUE_TYPES.get(str(target))
    return expected is not None and type(value) is expected


def conform(target: str, value: Value, what: str) -> Value:
    """Coerce and check a value bound to a typed slot.

    `what` names the slot in the error message, for example
    ``"variable 'x'"``.
    """
    converted = coerce(target, value)
    if not compatible(target, converted):
        raise TypeMismatchError(
            f"Tipo incompatible para {what}. Esperado: {target}, recibido: {type_name(converted)}"
        )
    return converted


def format_decimal(value: float) -> str:
    """Render a float the way the language prints doubles.

    Magnitudes in [1e-3, 1e7) use plain notation with at least one
    fractional digit (``5.0``); everything else uses a mantissa and an
    exponent (``1.0E10``).
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == 0:
        return '-0.0' if math.copysign(1.0, value) < 0 else '0.0'
    if 1e-3 <= abs(value) < 1e7:
        return repr(value)
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = ''.join(str(d) for d in digits)
    mantissa = text[0] + '.' + (text[1:] or '0')
    power = len(digits) - 1 + exponent
    return f"{'-' if sign else ''}{mantissa}E{power}"


def to_string(value: Value) -> str:
    """Convert a value to the text used by `imprimir` and by `+` on text."""
    if isinstance(value, BoolVal):
        return 'verdadero' if value.value else 'falso'
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, DecimalVal):
        return format_decimal(value.value)
    if isinstance(value, (IntVal, LongVal)):
        return str(value.value)
    if isinstance(value, TextVal):
        return value.value
    return str(value)
