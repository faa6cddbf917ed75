from __future__ import annotations

from enum import IntEnum
from typing import Dict


class Opcode(IntEnum):
    # Control
    HALT = 0x00

    # Stack
    PUSH = 0x01  # imm operand
    POP = 0x02
    DUP = 0x03

    # Arithmetic
    ADD = 0x04
    SUB = 0x05
    MUL = 0x06
    DIV = 0x07

    # Logic
    NOT = 0x08
    AND = 0x09
    OR = 0x0A

    # Comparison
    ISEQ = 0x0B
    ISGT = 0x0C
    ISGE = 0x0D

    # Jumps
    JMP = 0x0E  # imm address
    JIF = 0x0F  # imm address

    # Locals
    LOAD = 0x10  # imm key
    STORE = 0x11  # imm key

    # Subroutines
    RET = 0x12
    CALL = 0x13  # imm address

    # Output
    WRITE = 0x14


# Number of immediates that follow each opcode in the program
IMMEDIATES: Dict[Opcode, int] = {op: 0 for op in Opcode}
IMMEDIATES.update({
    Opcode.PUSH: 1,
    Opcode.JMP: 1,
    Opcode.JIF: 1,
    Opcode.LOAD: 1,
    Opcode.STORE: 1,
    Opcode.CALL: 1,
})

BINARY_OPS = frozenset({
    Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV,
    Opcode.AND, Opcode.OR,
    Opcode.ISEQ, Opcode.ISGT, Opcode.ISGE,
})

# Opcodes whose immediate is a program address
ADDRESS_OPS = frozenset({Opcode.JMP, Opcode.JIF, Opcode.CALL})
