import pytest

from stackvm.engine import VM, Program


# Every test starts from a clean configuration: the STACKVM_* variables of the
# surrounding shell must not change tracing or step budgets under test.
@pytest.fixture(autouse=True)
def _clean_stackvm_env(monkeypatch):
    for var in ("STACKVM_TRACE", "STACKVM_DISASM", "STACKVM_MAX_STEPS"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def run():
    """Assemble the given items into a program and run it to HALT."""
    def _run(*items, **kwargs):
        vm = VM(Program.assemble(*items), **kwargs)
        return vm.run()
    return _run
