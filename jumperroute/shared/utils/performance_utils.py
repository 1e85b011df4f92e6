"""Performance monitoring utilities."""
import time
import logging
import psutil
from contextlib import contextmanager
from typing import Generator, Dict, Any
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class PerformanceMetrics:
    """Container for performance metrics."""
    execution_time: float = 0.0
    memory_start_mb: float = 0.0
    memory_end_mb: float = 0.0
    memory_peak_mb: float = 0.0
    additional_metrics: Dict[str, Any] = field(default_factory=dict)
    
    @property
    def memory_delta_mb(self) -> float:
        """Memory change during execution."""
        return self.memory_end_mb - self.memory_start_mb
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            'execution_time': self.execution_time,
            'memory_start_mb': self.memory_start_mb,
            'memory_end_mb': self.memory_end_mb,
            'memory_peak_mb': self.memory_peak_mb,
            'memory_delta_mb': self.memory_delta_mb,
            **self.additional_metrics
        }


@contextmanager
def timing_context(name: str = "operation", log_result: bool = True) -> Generator[PerformanceMetrics, None, None]:
    """Context manager for timing operations.
    
    Args:
        name: Name of the operation being timed
        log_result: Whether to log the timing result
        
    Yields:
        PerformanceMetrics object that gets populated during execution
    """
    metrics = PerformanceMetrics()
    
    start_time = time.perf_counter()
    process = psutil.Process()
    
    try:
        metrics.memory_start_mb = process.memory_info().rss / 1024 / 1024
        metrics.memory_peak_mb = metrics.memory_start_mb
    except psutil.Error:
        # Memory tracking is best effort
        pass
    
    try:
        yield metrics
    finally:
        metrics.execution_time = time.perf_counter() - start_time
        
        try:
            metrics.memory_end_mb = process.memory_info().rss / 1024 / 1024
            metrics.memory_peak_mb = max(metrics.memory_peak_mb, metrics.memory_end_mb)
        except psutil.Error:
            pass
        
        if log_result:
            logger.info(f"{name} completed in {metrics.execution_time:.3f}s")
            if metrics.memory_start_mb > 0:
                logger.debug(f"{name} memory: {metrics.memory_delta_mb:+.1f}MB "
                             f"(peak: {metrics.memory_peak_mb:.1f}MB)")
