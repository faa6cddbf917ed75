from __future__ import annotations

import sys
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple

from stackvm import config
from stackvm.errors import (
    InvalidCallTarget,
    InvalidJumpTarget,
    InvalidProgramShape,
    ProgramOutOfBounds,
    ReturnFromBaseFrame,
    StackUnderflow,
    StepBudgetExceeded,
    TypeMismatch,
    VMError,
)
from stackvm.opcodes import BINARY_OPS, IMMEDIATES, Opcode
from stackvm.types.operand import (
    Int,
    Operand,
    add,
    div,
    is_equal,
    is_greater,
    is_greater_equal,
    logical_and,
    logical_not,
    logical_or,
    mul,
    sub,
    to_index,
)
from stackvm.types.value import Data, Instruction, Value

from .frame import Frame
from .program import Program


class VM:
    """Fetch/decode/execute loop over a flat ``Program``.

    State is the instruction pointer, an operand stack of values and a stack of
    frames whose innermost entry holds the current locals. The base frame is
    created here and can never be returned from, so there is always a current
    frame. Every failure is raised as a ``VMError`` subclass; ``run()`` stops
    at the first one and the VM stays inspectable.
    """

    def __init__(self, program: Program, out: Optional[TextIO] = None, trace: Optional[bool] = None):
        if not isinstance(program, Program):
            program = Program.assemble(*program)
        self.program = program
        self.out = out
        self.trace = config.trace_enabled() if trace is None else trace
        self.halted = False
        self.ip = 0
        self.steps = 0
        # Top of stack is the end of the list
        self._stack: List[Value] = []
        # Innermost frame is the end of the list
        self._frames: List[Frame] = [Frame(0)]
        self._dispatch: Dict[Opcode, Callable[[Opcode], None]] = {}
        self._init_dispatch()

    def _init_dispatch(self) -> None:
        d = self._dispatch
        # Control
        d[Opcode.HALT] = self.op_halt
        # Stack
        d[Opcode.PUSH] = self.op_push
        d[Opcode.POP] = self.op_pop
        d[Opcode.DUP] = self.op_dup
        # Arithmetic / logic / comparison
        for op in BINARY_OPS:
            d[op] = self.op_binary
        d[Opcode.NOT] = self.op_not
        # Jumps
        d[Opcode.JMP] = self.op_jmp
        d[Opcode.JIF] = self.op_jif
        # Locals
        d[Opcode.LOAD] = self.op_load
        d[Opcode.STORE] = self.op_store
        # Subroutines
        d[Opcode.CALL] = self.op_call
        d[Opcode.RET] = self.op_ret
        # Output
        d[Opcode.WRITE] = self.op_write

    # --- Inspection ---
    @property
    def stack(self) -> Tuple[Value, ...]:
        """Operand stack, top first."""
        return tuple(reversed(self._stack))

    @property
    def operands(self) -> Tuple[Operand, ...]:
        return tuple(v.get_data() for v in reversed(self._stack))

    @property
    def current_frame(self) -> Frame:
        return self._frames[-1]

    @property
    def depth(self) -> int:
        return len(self._frames)

    def variables(self) -> List[Operand]:
        return self.current_frame.values()

    # --- Stack helpers ---
    def push(self, v: Value) -> None:
        self._stack.append(v)

    def pop(self) -> Value:
        if not self._stack:
            raise StackUnderflow(1, 0)
        return self._stack.pop()

    def peek(self) -> Value:
        if not self._stack:
            raise StackUnderflow(1, 0)
        return self._stack[-1]

    def _require(self, n: int) -> None:
        if len(self._stack) < n:
            raise StackUnderflow(n, len(self._stack))

    # --- Fetch ---
    def next(self) -> Value:
        if self.ip >= len(self.program):
            raise ProgramOutOfBounds(f"fetch at {self.ip} past program end {len(self.program)}")
        v = self.program[self.ip]
        self.ip += 1
        return v

    def _read_address(self, op: Opcode) -> int:
        target = self.next().get_data()
        try:
            return to_index(target)
        except TypeMismatch as ex:
            raise InvalidJumpTarget(f"{op.name} target {target!r}: {ex.message}") from ex

    # --- Per-op handlers ---
    def op_halt(self, op: Opcode) -> None:
        self.halted = True

    def op_push(self, op: Opcode) -> None:
        self.push(Data(self.next().get_data()))

    def op_pop(self, op: Opcode) -> None:
        self.pop()

    def op_dup(self, op: Opcode) -> None:
        self.push(self.peek())

    def op_binary(self, op: Opcode) -> None:
        self._require(2)
        # The operand pushed earlier is the left-hand side
        right = self.pop().get_data()
        left = self.pop().get_data()
        self.push(Data(_BINARY[op](left, right)))

    def op_not(self, op: Opcode) -> None:
        v = self.pop()
        self.push(Data(logical_not(v.get_data())))

    def op_jmp(self, op: Opcode) -> None:
        self.ip = self._read_address(op)

    def op_jif(self, op: Opcode) -> None:
        cond = self.pop()
        target = self._read_address(op)
        if cond.to_bool():
            self.ip = target

    def op_load(self, op: Opcode) -> None:
        key = self.next().get_data()
        self.push(Data(self.current_frame.get(key)))

    def op_store(self, op: Opcode) -> None:
        value = self.pop()
        key = self.next().get_data()
        self.current_frame.set(key, value.get_data())

    def op_call(self, op: Opcode) -> None:
        address = self.next().get_data()
        if not isinstance(address, Int) or not 0 < address.value < len(self.program):
            raise InvalidCallTarget(f"call target {address!r} outside 1..{len(self.program) - 1}")
        # Resume just past the immediate
        self._frames.append(Frame(self.ip))
        self.ip = address.value

    def op_ret(self, op: Opcode) -> None:
        if len(self._frames) <= 1:
            raise ReturnFromBaseFrame("return with only the base frame alive")
        frame = self._frames.pop()
        self.ip = frame.return_address

    def op_write(self, op: Opcode) -> None:
        v = self.peek()
        out = self.out if self.out is not None else sys.stdout
        out.write(str(v.get_data()))

    # --- Execution ---
    def step(self) -> None:
        if self.halted:
            return
        start = self.ip
        opcode: Any = None
        try:
            v = self.next()
            if not isinstance(v, Instruction):
                raise InvalidProgramShape(f"cannot execute data value {v}")
            opcode = v.opcode
            self._dispatch[opcode](opcode)
        except VMError as ex:
            ex.locate(start, opcode)
            raise
        self.steps += 1
        if self.trace:
            self._trace(start, opcode)

    def run(self, max_steps: Optional[int] = None) -> VM:
        if max_steps is None:
            max_steps = config.get_max_steps()
        elif max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {max_steps}")
        executed = 0
        while not self.halted:
            if max_steps is not None and executed >= max_steps:
                raise StepBudgetExceeded(f"no HALT within {max_steps} steps", ip=self.ip)
            self.step()
            executed += 1
        return self

    def _trace(self, start: int, opcode: Opcode) -> None:
        imms = self.program.values[start + 1: start + 1 + IMMEDIATES[opcode]]
        line = f"{start:04d}: {opcode.name}"
        if imms:
            line += " " + " ".join(str(i) for i in imms)
        stack = ", ".join(str(v) for v in self.stack)
        print(f"{line:<24} ip={self.ip:04d} depth={self.depth} stack=[{stack}]", file=config.diagnostics_stream())


_BINARY: Dict[Opcode, Callable[[Operand, Operand], Operand]] = {
    Opcode.ADD: add,
    Opcode.SUB: sub,
    Opcode.MUL: mul,
    Opcode.DIV: div,
    Opcode.AND: logical_and,
    Opcode.OR: logical_or,
    Opcode.ISEQ: is_equal,
    Opcode.ISGT: is_greater,
    Opcode.ISGE: is_greater_equal,
}


def run_program(program: Program, out: Optional[TextIO] = None, max_steps: Optional[int] = None) -> VM:
    if not isinstance(program, Program):
        program = Program.assemble(*program)
    if config.disasm_enabled():
        from .disasm import disassemble
        stream = config.diagnostics_stream()
        print("=== DISASM ===", file=stream)
        print(disassemble(program), file=stream)
        print("=== END DISASM ===", file=stream)
    vm = VM(program, out=out)
    return vm.run(max_steps=max_steps)
