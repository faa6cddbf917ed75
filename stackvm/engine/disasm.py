from __future__ import annotations

from stackvm.opcodes import ADDRESS_OPS, IMMEDIATES
from stackvm.types.operand import Int
from stackvm.types.value import Instruction

from .program import Program


def disassemble(program: Program) -> str:
    values = program.values
    out = []
    i = 0
    while i < len(values):
        v = values[i]
        if not isinstance(v, Instruction):
            # Keep walking so broken programs can still be inspected
            out.append(f"{i:04d}: .data {v.get_data()!r}")
            i += 1
            continue
        op = v.opcode
        line = f"{i:04d}: {op.name}"
        i += 1
        for _ in range(IMMEDIATES[op]):
            if i >= len(values):
                line += " <missing>"
                break
            imm = values[i]
            i += 1
            if isinstance(imm, Instruction):
                line += f" <opcode {imm.opcode.name}>"
                continue
            line += f" {imm.get_data()!r}"
            target = imm.get_data()
            if op in ADDRESS_OPS and isinstance(target, Int):
                line += f" -> {target.value:04d}"
        out.append(line)
    return "\n".join(out)
