"""Logging setup and solver-scoped log context."""
import logging
import logging.handlers
import sys
from pathlib import Path

from ..configuration.settings import LoggingSettings


def _level(name: str) -> int:
    return getattr(logging, name.upper())


def _file_handler(settings: LoggingSettings) -> logging.Handler:
    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=log_path,
        maxBytes=settings.max_file_size_mb * 1024 * 1024,
        backupCount=settings.backup_count,
        encoding='utf-8'
    )


def setup_logging(settings: LoggingSettings) -> None:
    """Configure the root logger from LoggingSettings.

    Replaces any existing root handlers, so calling it again with new
    settings reconfigures rather than duplicates output. Per-component
    levels let noisy solvers (e.g. ``jumperroute.algorithms.hypergraph``)
    be turned down independently.
    """
    level = _level(settings.level)
    formatter = logging.Formatter(fmt=settings.format_string, datefmt=settings.date_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    def attach(handler: logging.Handler) -> None:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if settings.console_output:
        attach(logging.StreamHandler(sys.stdout))

    if settings.file_output:
        try:
            attach(_file_handler(settings))
        except OSError as e:
            root_logger.error(f"Cannot log to {settings.log_file}: {e}")

    for component, component_level in settings.component_levels.items():
        logging.getLogger(component).setLevel(_level(component_level))

    root_logger.info(f"jumperroute logging initialized at {settings.level.upper()}")


class SolverLogger(logging.LoggerAdapter):
    """Prefixes messages with the solver, its current iteration and context.

    The iteration is read when the message is logged, so one adapter created
    in ``__init__`` stays accurate for the life of the solver::

        [SectionOptimizer it=12 section=cmn_4] 3.2100 -> 2.9800
    """

    def __init__(self, logger: logging.Logger, solver, **context):
        super().__init__(logger, {k: v for k, v in context.items() if v is not None})
        self.solver = solver

    def bind(self, **context) -> "SolverLogger":
        """Return a logger with extra context, e.g. the node being processed."""
        return SolverLogger(self.logger, self.solver, **{**self.extra, **context})

    def process(self, msg, kwargs):
        fields = [self.solver.solver_name, f"it={self.solver.iterations}"]
        fields.extend(f"{k}={v}" for k, v in self.extra.items())
        return f"[{' '.join(fields)}] {msg}", kwargs
