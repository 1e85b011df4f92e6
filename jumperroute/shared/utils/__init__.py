"""Shared utilities."""
from .logging_utils import setup_logging, SolverLogger
from .validation_utils import (
    validate_positive_number, validate_non_negative_number, validate_range,
    validate_connection_name
)
from .performance_utils import timing_context, PerformanceMetrics

__all__ = [
    'setup_logging', 'SolverLogger',
    'validate_positive_number', 'validate_non_negative_number', 'validate_range',
    'validate_connection_name',
    'timing_context', 'PerformanceMetrics'
]
