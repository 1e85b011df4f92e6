"""Base class for cooperatively stepped solvers."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ...shared.exceptions import JumperRouteException, SolverFailedError
from ...shared.utils.logging_utils import SolverLogger
from ...shared.utils.performance_utils import timing_context


class BaseSolver(ABC):
    """A solver that makes progress one bounded step at a time.
    
    Callers invoke :meth:`step` until ``solved`` or ``failed`` is set, or call
    :meth:`solve` to run to completion. Exceeding ``max_iterations`` fails the
    solver; this is the only timeout.
    """
    
    def __init__(self, max_iterations: int = 100_000):
        self.solved = False
        self.failed = False
        self.error: Optional[str] = None
        self.failure_context: Dict[str, str] = {}
        self.iterations = 0
        self.max_iterations = max_iterations
        self.time_to_solve: Optional[float] = None
        self.stats: Dict[str, Any] = {}
        self.log = SolverLogger(logging.getLogger(type(self).__module__), self)
    
    @property
    def solver_name(self) -> str:
        return type(self).__name__
    
    @property
    def is_terminal(self) -> bool:
        return self.solved or self.failed
    
    def step(self) -> None:
        """Perform one unit of work. No-op once solved or failed."""
        if self.is_terminal:
            return
        
        if self.iterations >= self.max_iterations:
            self.fail(f"{self.solver_name} ran out of iterations ({self.max_iterations})")
            return
        
        self.iterations += 1
        try:
            self._step()
        except JumperRouteException as e:
            self.failure_context = e.context
            self.fail(str(e))
    
    def solve(self) -> None:
        """Step until solved or failed."""
        with timing_context(self.solver_name, log_result=False) as metrics:
            while not self.is_terminal:
                self.step()
        
        self.time_to_solve = metrics.execution_time
        if self.solved:
            self.log.info(f"solved in {self.iterations} iterations "
                          f"({self.time_to_solve:.3f}s)")
        else:
            self.log.bind(**self.failure_context).warning(f"failed: {self.error}")
    
    def fail(self, error: str) -> None:
        """Transition to the failed state with a reason."""
        self.error = error
        self.failed = True
        self.log.debug(f"failed: {error}")
    
    def require_solved(self) -> None:
        """Raise if the solver did not finish successfully.
        
        Raises:
            SolverFailedError: If the solver failed or is still running
        """
        if self.failed:
            raise SolverFailedError(self.error or "unknown error", solver_name=self.solver_name)
        if not self.solved:
            raise SolverFailedError(f"{self.solver_name} has not finished",
                                    solver_name=self.solver_name)
    
    @abstractmethod
    def _step(self) -> None:
        """Solver-specific unit of work."""
        pass
