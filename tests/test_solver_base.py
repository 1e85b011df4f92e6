"""Tests for the stepped solver base class."""
import pytest

from jumperroute.algorithms.base.solver import BaseSolver
from jumperroute.shared.exceptions import RoutingError, SolverFailedError


class CountingSolver(BaseSolver):
    """Solves after a fixed number of steps."""

    def __init__(self, steps_needed=3, **kwargs):
        super().__init__(**kwargs)
        self.steps_needed = steps_needed
        self.count = 0

    def _step(self):
        self.count += 1
        if self.count >= self.steps_needed:
            self.solved = True


class RaisingSolver(BaseSolver):
    def _step(self):
        raise RoutingError("cannot route", connection_name="net1")


class TestBaseSolver:
    """Test the step/solve state machine"""

    def test_solves_in_steps(self):
        solver = CountingSolver()
        solver.solve()

        assert solver.solved
        assert not solver.failed
        assert solver.iterations == 3
        assert solver.time_to_solve is not None
        solver.require_solved()

    def test_iteration_budget(self):
        solver = CountingSolver(steps_needed=5, max_iterations=2)
        solver.solve()

        assert solver.failed
        assert solver.error == "CountingSolver ran out of iterations (2)"
        assert solver.count == 2

    def test_domain_exception_fails_solver(self):
        solver = RaisingSolver()
        solver.solve()

        assert solver.failed
        assert solver.error == "cannot route"
        assert solver.failure_context == {"connection": "net1"}

    def test_step_after_terminal_is_noop(self):
        solver = CountingSolver(steps_needed=1)
        solver.step()
        solver.step()

        assert solver.iterations == 1
        assert solver.count == 1

    def test_require_solved(self):
        solver = CountingSolver(steps_needed=5, max_iterations=1)
        with pytest.raises(SolverFailedError):
            solver.require_solved()

        solver.solve()
        with pytest.raises(SolverFailedError) as exc_info:
            solver.require_solved()
        assert "ran out of iterations" in str(exc_info.value)

    def test_fail_records_error(self):
        solver = CountingSolver()
        solver.fail("stopped")

        assert solver.is_terminal
        assert solver.error == "stopped"
