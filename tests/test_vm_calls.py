import pytest

from stackvm.engine import VM, Program
from stackvm.errors import InvalidCallTarget, ReturnFromBaseFrame
from stackvm.opcodes import Opcode
from stackvm.types import Int, Null

HALT, PUSH, MUL, SUB = Opcode.HALT, Opcode.PUSH, Opcode.MUL, Opcode.SUB
ISGT, ISGE, JIF = Opcode.ISGT, Opcode.ISGE, Opcode.JIF
LOAD, STORE, CALL, RET = Opcode.LOAD, Opcode.STORE, Opcode.CALL, Opcode.RET


def test_func_no_arguments_no_return(run):
    vm = run(CALL, 3, HALT, RET)
    assert vm.halted
    assert vm.ip == 3
    assert vm.stack == ()
    assert vm.depth == 1


def test_func_no_arguments_with_return(run):
    vm = run(CALL, 3, HALT, PUSH, 7, RET)
    assert vm.halted
    assert vm.ip == 3
    assert vm.operands == (Int(7),)


def test_func_with_arguments_return(run):
    vm = run(PUSH, 3, CALL, 5, HALT, PUSH, 2, MUL, RET)
    assert vm.halted
    assert vm.ip == 5
    assert vm.operands == (Int(6),)


def test_call_pushes_a_frame_returning_past_the_immediate():
    vm = VM(Program.assemble(CALL, 3, HALT, RET))
    vm.step()
    assert vm.depth == 2
    assert vm.ip == 3
    assert vm.current_frame.return_address == 2
    vm.step()
    assert vm.depth == 1
    assert vm.ip == 2


def test_max_ab(run):
    # int max(int a, int b) { if (a >= b) return a; else return b; }
    vm = run(
        PUSH, 6,            # first argument
        PUSH, 4,            # second argument
        CALL, 7,
        HALT,               # 6
        STORE, "b",         # 7
        STORE, "a",
        LOAD, "a",
        LOAD, "b",
        ISGE,
        JIF, 21,            # 16
        LOAD, "b",
        RET,
        LOAD, "a",          # 21
        RET,
    )
    assert vm.halted
    assert vm.ip == 7
    assert vm.operands == (Int(6),)
    # the callee's locals went away with its frame
    assert vm.variables() == []


def test_frames_do_not_see_each_others_variables(run):
    vm = run(
        PUSH, 1, STORE, "x",    # 0
        CALL, 7,                # 4
        HALT,                   # 6
        LOAD, "x",              # 7
        RET,                    # 9
    )
    assert vm.operands == (Null(),)
    assert vm.current_frame.get("x") == Int(1)


def test_recursive_factorial(run):
    vm = run(
        PUSH, 5, CALL, 5,               # 0
        HALT,                           # 4
        STORE, "n",                     # 5: fact(n)
        LOAD, "n", PUSH, 1, ISGT,       # 7
        JIF, 17,                        # 12
        PUSH, 1, RET,                   # 14
        LOAD, "n",                      # 17
        LOAD, "n", PUSH, 1, SUB,        # 19
        CALL, 5,                        # 24
        MUL, RET,                       # 26
    )
    assert vm.halted
    assert vm.ip == 5
    assert vm.depth == 1
    assert vm.operands == (Int(120),)


def test_return_from_base_frame(run):
    with pytest.raises(ReturnFromBaseFrame) as ei:
        run(RET)
    assert ei.value.ip == 0
    assert ei.value.opcode == RET


@pytest.mark.parametrize("target", [0, 3, 99, -1, "x", 1.5])
def test_invalid_call_target(run, target):
    # valid targets are 1..len(program)-1, here 1..2
    with pytest.raises(InvalidCallTarget):
        run(CALL, target, HALT)
