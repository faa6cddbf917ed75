# stackvm: a small stack-based bytecode virtual machine.
#
# A program is a flat sequence of values: opcodes (Instruction) interleaved
# with their immediate operands (Data). The VM executes it against an operand
# stack and a stack of call frames holding local variables.

from stackvm.errors import VMError
from stackvm.opcodes import Opcode
from stackvm.types import Operand, Null, Int, Float, Str, Bool, Value, Instruction, Data
from stackvm.engine import Program, Frame, VM, run_program, disassemble

__all__ = [
    "VMError",
    "Opcode",
    "Operand",
    "Null",
    "Int",
    "Float",
    "Str",
    "Bool",
    "Value",
    "Instruction",
    "Data",
    "Program",
    "Frame",
    "VM",
    "run_program",
    "disassemble",
]
