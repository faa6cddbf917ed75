from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Tuple, Type, Union

from stackvm.errors import DivisionByZero, NotBoolean, TypeMismatch

# Integers behave as signed 64-bit machine words
INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


def wrap_int(v: int) -> int:
    return ((v - INT_MIN) % (1 << INT_BITS)) + INT_MIN


@dataclass(frozen=True, repr=False)
class Operand:
    """A literal operand: one of Null, Int, Float, Str or Bool.

    Instances are immutable value types; copying is always safe. Arithmetic and
    comparison dunders delegate to the module-level functions below, so
    ``Int(1) + Float(2.0)`` and ``add(Int(1), Float(2.0))`` are the same thing.
    """

    def __add__(self, other: Operand) -> Operand:
        return add(self, other)

    def __sub__(self, other: Operand) -> Operand:
        return sub(self, other)

    def __mul__(self, other: Operand) -> Operand:
        return mul(self, other)

    def __truediv__(self, other: Operand) -> Operand:
        return div(self, other)

    def __and__(self, other: Operand) -> Operand:
        return logical_and(self, other)

    def __or__(self, other: Operand) -> Operand:
        return logical_or(self, other)

    def __invert__(self) -> Operand:
        return logical_not(self)

    def __gt__(self, other: Operand) -> bool:
        return _ordered(self, other, "ISGT", lambda a, b: a > b)

    def __ge__(self, other: Operand) -> bool:
        return _ordered(self, other, "ISGE", lambda a, b: a >= b)

    def __lt__(self, other: Operand) -> bool:
        return _ordered(other, self, "ISGT", lambda a, b: a > b)

    def __le__(self, other: Operand) -> bool:
        return _ordered(other, self, "ISGE", lambda a, b: a >= b)

    @property
    def type_name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, repr=False)
class Null(Operand):
    def __repr__(self): return "Null()"
    def __str__(self): return "null"


@dataclass(frozen=True, repr=False)
class Int(Operand):
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeMismatch(f"Int requires an int, got {type(self.value).__name__}")
        object.__setattr__(self, "value", wrap_int(self.value))

    def __repr__(self): return f"Int({self.value})"
    def __str__(self): return str(self.value)


@dataclass(frozen=True, repr=False)
class Float(Operand):
    value: float

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeMismatch(f"Float requires a float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))

    def __repr__(self): return f"Float({self.value!r})"
    def __str__(self): return repr(self.value)


@dataclass(frozen=True, repr=False)
class Str(Operand):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeMismatch(f"Str requires a str, got {type(self.value).__name__}")

    def __repr__(self): return f"Str({self.value!r})"
    def __str__(self): return self.value


@dataclass(frozen=True, repr=False)
class Bool(Operand):
    value: bool

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise TypeMismatch(f"Bool requires a bool, got {type(self.value).__name__}")

    def __repr__(self): return f"Bool({self.value})"
    def __str__(self): return "true" if self.value else "false"


PyScalar = Union[None, bool, int, float, str]


def operand(v: Union[Operand, PyScalar]) -> Operand:
    """Lift a plain Python scalar into the matching operand variant."""
    if isinstance(v, Operand):
        return v
    if v is None:
        return Null()
    # bool first: bool is an int subclass
    if isinstance(v, bool):
        return Bool(v)
    if isinstance(v, int):
        return Int(v)
    if isinstance(v, float):
        return Float(v)
    if isinstance(v, str):
        return Str(v)
    raise TypeMismatch(f"Cannot use {type(v).__name__} as an operand")


def _mismatch(opname: str, a: Operand, b: Operand) -> TypeMismatch:
    return TypeMismatch(f"{opname} not defined for {a.type_name} and {b.type_name}")


def _promote(opname: str, a: Operand, b: Operand) -> Tuple[Type[Operand], Any, Any]:
    if isinstance(a, Int) and isinstance(b, Int):
        return Int, a.value, b.value
    if isinstance(a, (Int, Float)) and isinstance(b, (Int, Float)):
        return Float, float(a.value), float(b.value)
    raise _mismatch(opname, a, b)


def _arith(opname: str, a: Operand, b: Operand, fn: Callable[[Any, Any], Any]) -> Operand:
    kind, l, r = _promote(opname, a, b)
    if kind is Int:
        return Int(wrap_int(fn(l, r)))
    return Float(fn(l, r))


def add(a: Operand, b: Operand) -> Operand:
    if isinstance(a, Str) and isinstance(b, Str):
        return Str(a.value + b.value)
    return _arith("ADD", a, b, lambda l, r: l + r)


def sub(a: Operand, b: Operand) -> Operand:
    return _arith("SUB", a, b, lambda l, r: l - r)


def mul(a: Operand, b: Operand) -> Operand:
    return _arith("MUL", a, b, lambda l, r: l * r)


def _int_div(l: int, r: int) -> int:
    # Truncate toward zero like machine integer division
    q = abs(l) // abs(r)
    return q if (l < 0) == (r < 0) else -q


def _float_div(l: float, r: float) -> float:
    if r != 0.0:
        return l / r
    if l == 0.0 or math.isnan(l):
        return math.nan
    return math.copysign(math.inf, l) * math.copysign(1.0, r)


def div(a: Operand, b: Operand) -> Operand:
    kind, l, r = _promote("DIV", a, b)
    if kind is Int:
        if r == 0:
            raise DivisionByZero(f"integer division by zero: {l} / 0")
        return Int(wrap_int(_int_div(l, r)))
    return Float(_float_div(l, r))


def logical_and(a: Operand, b: Operand) -> Operand:
    if isinstance(a, Bool) and isinstance(b, Bool):
        return Bool(a.value and b.value)
    raise _mismatch("AND", a, b)


def logical_or(a: Operand, b: Operand) -> Operand:
    if isinstance(a, Bool) and isinstance(b, Bool):
        return Bool(a.value or b.value)
    raise _mismatch("OR", a, b)


def logical_not(a: Operand) -> Operand:
    return Bool(not to_bool(a))


def to_bool(a: Operand) -> bool:
    if isinstance(a, Bool):
        return a.value
    raise NotBoolean(f"expected Bool, got {a.type_name}")


def to_index(a: Operand) -> int:
    if not isinstance(a, Int):
        raise TypeMismatch(f"expected Int index, got {a.type_name}")
    if a.value < 0:
        raise TypeMismatch(f"index must be non-negative, got {a.value}")
    return a.value


def is_equal(a: Operand, b: Operand) -> Operand:
    if isinstance(a, Float) and isinstance(b, Float):
        # NaN never equals itself
        return Bool(a.value == b.value)
    # Different variants are simply unequal
    return Bool(a == b)


def _ordered(a: Operand, b: Operand, opname: str, fn: Callable[[Any, Any], bool]) -> bool:
    if type(a) is type(b) and isinstance(a, (Int, Float, Str)):
        return fn(a.value, b.value)
    raise _mismatch(opname, a, b)


def is_greater(a: Operand, b: Operand) -> Operand:
    return Bool(_ordered(a, b, "ISGT", lambda l, r: l > r))


def is_greater_equal(a: Operand, b: Operand) -> Operand:
    return Bool(_ordered(a, b, "ISGE", lambda l, r: l >= r))
