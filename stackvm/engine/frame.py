from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from stackvm.errors import TypeMismatch
from stackvm.types.operand import Int, Null, Operand, Str, operand

Key = Union[Int, Str]


@dataclass
class Frame:
    """Local variables of one active call plus the address to resume at.

    Reading a variable that was never stored yields ``Null()``.
    """

    return_address: int = 0
    variables: Dict[Key, Operand] = field(default_factory=dict)

    def get(self, key: Any) -> Operand:
        return self.variables.get(_check_key(key), Null())

    def set(self, key: Any, value: Operand) -> None:
        self.variables[_check_key(key)] = value

    def values(self) -> List[Operand]:
        return list(self.variables.values())


def _check_key(key: Any) -> Key:
    key = operand(key)
    if isinstance(key, (Int, Str)):
        return key
    raise TypeMismatch(f"variable key must be Int or Str, got {key.type_name}")
