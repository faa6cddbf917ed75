import pytest

from stackvm.engine import VM, Program
from stackvm.errors import InvalidJumpTarget, NotBoolean, ProgramOutOfBounds, StepBudgetExceeded
from stackvm.opcodes import Opcode
from stackvm.types import Int, Null

HALT, PUSH, POP = Opcode.HALT, Opcode.PUSH, Opcode.POP
ADD, SUB, NOT, ISGT = Opcode.ADD, Opcode.SUB, Opcode.NOT, Opcode.ISGT
JMP, JIF, LOAD, STORE = Opcode.JMP, Opcode.JIF, Opcode.LOAD, Opcode.STORE


def test_jump(run):
    vm = run(JMP, 3, HALT, JMP, 2)
    assert vm.halted
    assert vm.ip == 3


def test_jump_conditional(run):
    vm = run(
        PUSH, True,
        JIF, 5,
        POP,         # skipped
        PUSH, False,
        JIF, 4,      # not taken
        HALT,
    )
    assert vm.halted
    assert vm.ip == 10
    assert vm.stack == ()


def test_if_else(run):
    # if (a > b) { c = a } else { c = b }
    vm = run(
        PUSH, 6, STORE, "a",     # 0
        PUSH, 4, STORE, "b",     # 4
        LOAD, "a",               # 8
        LOAD, "b",               # 10
        ISGT,                    # 12
        JIF, 21,                 # 13
        LOAD, "b", STORE, "c",   # 15: else path
        JMP, 25,                 # 19
        LOAD, "a", STORE, "c",   # 21: if path
        HALT,                    # 25
    )
    assert vm.halted
    assert vm.stack == ()
    assert vm.current_frame.get("a") == Int(6)
    assert vm.current_frame.get("b") == Int(4)
    assert vm.current_frame.get("c") == Int(6)


def test_countdown_loop(run):
    # sum = 0; n = 5; while (n > 0) { sum = sum + n; n = n - 1 }
    vm = run(
        PUSH, 0, STORE, "sum",           # 0
        PUSH, 5, STORE, "n",             # 4
        LOAD, "n", PUSH, 0, ISGT, NOT,   # 8
        JIF, 32,                         # 14
        LOAD, "sum", LOAD, "n", ADD,     # 16
        STORE, "sum",                    # 21
        LOAD, "n", PUSH, 1, SUB,         # 23
        STORE, "n",                      # 28
        JMP, 8,                          # 30
        HALT,                            # 32
    )
    assert vm.current_frame.get("sum") == Int(15)
    assert vm.current_frame.get("n") == Int(0)
    assert vm.stack == ()


def test_store_then_load_round_trips(run):
    vm = run(PUSH, 42, STORE, "a", LOAD, "a", HALT)
    assert vm.ip == 7
    assert vm.variables() == [Int(42)]
    assert vm.operands == (Int(42),)


def test_store_pops_the_value(run):
    vm = run(PUSH, 42, STORE, "a", HALT)
    assert vm.ip == 5
    assert vm.stack == ()
    assert vm.variables() == [Int(42)]


def test_load_of_undefined_variable_is_null(run):
    vm = run(LOAD, "a", LOAD, 7, HALT)
    assert vm.ip == 5
    assert vm.operands == (Null(), Null())


def test_runaway_program_is_bounded_by_step_budget():
    vm = VM(Program.assemble(JMP, 0))
    with pytest.raises(StepBudgetExceeded):
        vm.run(max_steps=100)
    assert vm.steps == 100
    assert not vm.halted


def test_step_budget_from_environment(monkeypatch):
    monkeypatch.setenv("STACKVM_MAX_STEPS", "10")
    vm = VM(Program.assemble(JMP, 0))
    with pytest.raises(StepBudgetExceeded):
        vm.run()
    assert vm.steps == 10


def test_step_budget_is_not_hit_by_halting_programs():
    vm = VM(Program.assemble(PUSH, 1, HALT)).run(max_steps=2)
    assert vm.halted


@pytest.mark.parametrize("budget", [0, -1])
def test_step_budget_must_be_positive(budget):
    vm = VM(Program.assemble(HALT))
    with pytest.raises(ValueError):
        vm.run(max_steps=budget)
    assert vm.steps == 0
    assert not vm.halted


def test_jif_requires_a_boolean_condition(run):
    with pytest.raises(NotBoolean):
        run(PUSH, 1, JIF, 0, HALT)


@pytest.mark.parametrize("target", [-1, "x", 1.0, True])
def test_jump_target_must_be_a_non_negative_int(run, target):
    with pytest.raises(InvalidJumpTarget):
        run(JMP, target, HALT)
    with pytest.raises(InvalidJumpTarget):
        run(PUSH, True, JIF, target, HALT)


def test_jump_past_the_end_fails_on_next_fetch(run):
    with pytest.raises(ProgramOutOfBounds) as ei:
        run(JMP, 10, HALT)
    assert ei.value.ip == 10


def test_running_off_the_end_without_halt(run):
    with pytest.raises(ProgramOutOfBounds) as ei:
        run(PUSH, 1)
    assert ei.value.ip == 2
