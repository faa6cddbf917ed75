from __future__ import annotations

from typing import Any, Optional


class VMError(Exception):
    """ Base class for all stackvm errors"""

    def __init__(self, message: str = "", *, ip: Optional[int] = None, opcode: Any = None):
        super().__init__(message)
        self.message = message
        self.ip = ip
        self.opcode = opcode

    def locate(self, ip: int, opcode: Any) -> VMError:
        # Keep the innermost location if one is already recorded
        if self.ip is None:
            self.ip = ip
        if self.opcode is None:
            self.opcode = opcode
        return self

    def __str__(self) -> str:
        if self.ip is None:
            return self.message
        if self.opcode is None:
            return f"{self.message} (at {self.ip:04d})"
        name = getattr(self.opcode, "name", self.opcode)
        return f"{self.message} (at {self.ip:04d} {name})"


class ProgramOutOfBounds(VMError):
    """ Raised when the instruction pointer is fetched at or past the program end"""


class InvalidProgramShape(VMError):
    """ Raised when a data value is found where an opcode must be executed"""


class NotData(InvalidProgramShape):
    """ Raised when an operand is requested from an instruction value"""


class StackUnderflow(VMError):
    """ Raised when an opcode needs more operands than the stack holds"""

    def __init__(self, needed: int, available: int, **kw):
        super().__init__(f"stack underflow: needed {needed}, have {available}", **kw)
        self.needed = needed
        self.available = available


class TypeMismatch(VMError):
    """ Raised when operand types are incompatible with an operation"""


class NotBoolean(TypeMismatch):
    """ Raised when a boolean is required and the operand is not one"""


class DivisionByZero(VMError):
    """ Raised on integer division by zero"""


class InvalidJumpTarget(VMError):
    """ Raised when a jump immediate is not a non-negative integer"""


class InvalidCallTarget(VMError):
    """ Raised when a call address is outside the program"""


class ReturnFromBaseFrame(VMError):
    """ Raised when returning with only the base frame alive"""


class StepBudgetExceeded(VMError):
    """ Raised when run() executes more steps than the caller allowed"""
