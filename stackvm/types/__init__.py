# Value model: literal operands and the tagged program values that carry them.
from .operand import Operand, Null, Int, Float, Str, Bool
from .value import Value, Instruction, Data

__all__ = [
    "Operand",
    "Null",
    "Int",
    "Float",
    "Str",
    "Bool",
    "Value",
    "Instruction",
    "Data",
]
