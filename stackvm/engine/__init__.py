from __future__ import annotations

# Public surface for the execution engine
from .program import Program
from .frame import Frame
from .vm import VM, run_program
from .disasm import disassemble

__all__ = [
    "Program",
    "Frame",
    "VM",
    "run_program",
    "disassemble",
]
