from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Tuple

from stackvm.errors import InvalidProgramShape, ProgramOutOfBounds
from stackvm.opcodes import IMMEDIATES, Opcode
from stackvm.types.operand import operand
from stackvm.types.value import Data, Instruction, Value


@dataclass(frozen=True)
class Program:
    """An immutable, flat sequence of values addressed by the instruction pointer.

    Opcodes and their immediates are stored inline: ``PUSH 10`` occupies two
    consecutive addresses, and jump/call targets are plain indexes into the
    same sequence.
    """

    values: Tuple[Value, ...] = field(default_factory=tuple)

    def __post_init__(self):
        values = tuple(self.values)
        for ix, v in enumerate(values):
            if not isinstance(v, Value):
                raise InvalidProgramShape(f"program item {ix} is not a Value: {v!r}")
        object.__setattr__(self, "values", values)

    @classmethod
    def assemble(cls, *items: Any) -> Program:
        """Build a program from opcodes, values, operands and Python scalars.

        >>> Program.assemble(Opcode.PUSH, 10, Opcode.PUSH, 12, Opcode.ADD, Opcode.HALT)
        """
        return cls(tuple(_to_value(item) for item in items))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.values)

    def __getitem__(self, ip: int) -> Value:
        if not 0 <= ip < len(self.values):
            raise ProgramOutOfBounds(f"ip {ip} outside program of length {len(self.values)}", ip=ip)
        return self.values[ip]

    def instructions(self) -> Iterator[Tuple[int, Opcode, Tuple[Value, ...]]]:
        """Walk the program yielding ``(address, opcode, immediates)``."""
        ip = 0
        n = len(self.values)
        while ip < n:
            v = self.values[ip]
            if not isinstance(v, Instruction):
                raise InvalidProgramShape(f"data {v} at {ip:04d} where an opcode was expected", ip=ip)
            count = IMMEDIATES[v.opcode]
            imms = self.values[ip + 1: ip + 1 + count]
            if len(imms) < count:
                raise ProgramOutOfBounds(f"{v.opcode.name} at {ip:04d} is missing its immediate", ip=ip)
            yield ip, v.opcode, imms
            ip += 1 + count


def _to_value(item: Any) -> Value:
    if isinstance(item, Value):
        return item
    if isinstance(item, Opcode):
        return Instruction(item)
    return Data(operand(item))
