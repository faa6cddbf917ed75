from __future__ import annotations
import os
import sys
from typing import Optional, TextIO


_TRUTHY = ('1', 'true', 'yes', 'on')


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def int_from_env(var: str, default: Optional[int] = None) -> Optional[int]:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{var} must be positive, got {value}")
    return value


def trace_enabled() -> bool:
    return flag_from_env('STACKVM_TRACE')


def disasm_enabled() -> bool:
    return flag_from_env('STACKVM_DISASM')


def get_max_steps() -> Optional[int]:
    return int_from_env('STACKVM_MAX_STEPS')


def diagnostics_stream() -> TextIO:
    # Resolved per call so that test capture of stderr is honoured
    return sys.stderr
