from timeit import timeit

from stackvm.engine import VM, Program
from stackvm.opcodes import Opcode

HALT, PUSH, ADD, SUB, MUL = Opcode.HALT, Opcode.PUSH, Opcode.ADD, Opcode.SUB, Opcode.MUL
NOT, ISGT, JMP, JIF = Opcode.NOT, Opcode.ISGT, Opcode.JMP, Opcode.JIF
LOAD, STORE, CALL, RET = Opcode.LOAD, Opcode.STORE, Opcode.CALL, Opcode.RET


def time_vm(program: Program, rounds: int) -> float:
    """Time VM execution only: the program is assembled once and a fresh VM
    runs it each round.
    """
    # Warmup once
    VM(program, trace=False).run()
    return timeit(lambda: VM(program, trace=False).run(), number=rounds)


def sum_loop(n: int) -> Program:
    # sum = 0; while (n > 0) { sum = sum + n; n = n - 1 }
    return Program.assemble(
        PUSH, 0, STORE, "sum",
        PUSH, n, STORE, "n",
        LOAD, "n", PUSH, 0, ISGT, NOT,
        JIF, 32,
        LOAD, "sum", LOAD, "n", ADD,
        STORE, "sum",
        LOAD, "n", PUSH, 1, SUB,
        STORE, "n",
        JMP, 8,
        HALT,
    )


def recursive_factorial(n: int) -> Program:
    return Program.assemble(
        PUSH, n, CALL, 5,
        HALT,
        STORE, "n",
        LOAD, "n", PUSH, 1, ISGT,
        JIF, 17,
        PUSH, 1, RET,
        LOAD, "n",
        LOAD, "n", PUSH, 1, SUB,
        CALL, 5,
        MUL, RET,
    )


RPN_EXPR = Program.assemble(PUSH, 1, PUSH, 2, PUSH, 3, MUL, ADD, PUSH, 7, Opcode.DIV, HALT)


def _print(name: str, program: Program, rounds: int) -> None:
    t = time_vm(program, rounds)
    print(f"Benchmark: {name}")
    print(f"  vm: {t:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    _print("rpn expression", RPN_EXPR, rounds=20000)
    _print("sum loop 1..500", sum_loop(500), rounds=200)
    _print("recursive factorial (20)", recursive_factorial(20), rounds=2000)
