from __future__ import annotations

from dataclasses import dataclass

from stackvm.opcodes import Opcode
from stackvm.errors import InvalidProgramShape, NotData, TypeMismatch
from stackvm.types.operand import Operand, to_bool
from stackvm.types.operand import operand as to_operand


@dataclass(frozen=True, repr=False)
class Value:
    """A program token: either an ``Instruction`` or a ``Data`` operand.

    Programs are homogeneous sequences of values, so opcodes and their
    immediates share one address space.
    """

    def get_data(self) -> Operand:
        raise NotImplementedError

    def to_bool(self) -> bool:
        return to_bool(self.get_data())

    def __gt__(self, other: Value) -> bool:
        return _data_of(self) > _data_of(other)

    def __ge__(self, other: Value) -> bool:
        return _data_of(self) >= _data_of(other)

    def __lt__(self, other: Value) -> bool:
        return _data_of(self) < _data_of(other)

    def __le__(self, other: Value) -> bool:
        return _data_of(self) <= _data_of(other)


@dataclass(frozen=True, repr=False)
class Instruction(Value):
    opcode: Opcode

    def __post_init__(self):
        if isinstance(self.opcode, bool):
            raise InvalidProgramShape(f"unknown opcode {self.opcode!r}")
        try:
            object.__setattr__(self, "opcode", Opcode(self.opcode))
        except ValueError:
            raise InvalidProgramShape(f"unknown opcode {self.opcode!r}") from None

    def get_data(self) -> Operand:
        raise NotData(f"expected data, found instruction {self.opcode.name}")

    def __repr__(self): return f"Instruction({self.opcode.name})"
    def __str__(self): return self.opcode.name


@dataclass(frozen=True, repr=False)
class Data(Value):
    operand: Operand

    def __post_init__(self):
        object.__setattr__(self, "operand", to_operand(self.operand))

    def get_data(self) -> Operand:
        return self.operand

    def __repr__(self): return f"Data({self.operand!r})"
    def __str__(self): return str(self.operand)


def _data_of(v: Value) -> Operand:
    if isinstance(v, Data):
        return v.operand
    raise TypeMismatch(f"cannot order {v!r}")
