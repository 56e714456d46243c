"""
Structured logging configuration using structlog.

Provides JSON-structured logs that are queryable and include:
- Timestamp
- Log level
- Component name
- Data snapshots (hashed for large arrays)
- Memory usage

"""

import hashlib
import logging
import sys
from typing import Any, Dict, Optional

import numpy as np
import psutil
import structlog


def hash_array(arr: np.ndarray) -> str:
    """Hash a numpy array for logging without dumping all data."""
    if arr.size == 0:
        return "empty"

    if arr.dtype == np.object_:
        return f"object_array_size_{arr.size}"

    data_hash = hashlib.md5(np.ascontiguousarray(arr).tobytes()).hexdigest()[:8]
    return f"{data_hash}_shape_{arr.shape}_dtype_{arr.dtype}"


def get_memory_usage() -> float:
    """Get current process memory usage in MB."""
    process = psutil.Process()
    return process.memory_info().rss / 1024 / 1024


class DataSnapshotProcessor:
    """Processor to capture data snapshots for logging."""

    @staticmethod
    def process_data(data: Any, max_size: int = 100) -> Dict[str, Any]:
        """
        Process data for logging, hashing large arrays.

        Args:
            data: Data to process
            max_size: Maximum size before hashing

        Returns:
            Processed data suitable for JSON logging
        """
        if isinstance(data, np.ndarray):
            if data.size > max_size:
                numeric = np.issubdtype(data.dtype, np.number)
                return {
                    "type": "ndarray",
                    "hash": hash_array(data),
                    "shape": data.shape,
                    "dtype": str(data.dtype),
                    "min": float(np.nanmin(data)) if numeric else None,
                    "max": float(np.nanmax(data)) if numeric else None,
                    "has_nan": bool(np.isnan(data).any()) if numeric else False,
                }
            return {
                "type": "ndarray",
                "data": data.tolist(),
                "shape": data.shape,
                "dtype": str(data.dtype)
            }

        # DataFrame or Series
        if hasattr(data, 'shape') and hasattr(data, 'index'):
            return {
                "type": type(data).__name__,
                "shape": data.shape,
                "columns": list(data.columns) if hasattr(data, 'columns') else None,
            }

        return {"type": type(data).__name__, "repr": str(data)[:100]}


def configure_structlog(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure structlog for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout if not log_file else open(log_file, 'a'),
        level=getattr(logging, log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class InstrumentedLogger:
    """
    Logger with data snapshot and result-quality tracking.
    """

    def __init__(self, name: str):
        """Initialize instrumented logger."""
        self.logger = get_logger(name)
        self.snapshot_processor = DataSnapshotProcessor()

    def log_data_transform(
        self,
        stage: str,
        input_data: Any = None,
        output_data: Any = None,
        metadata: Optional[Dict] = None
    ):
        """
        Log a data transformation with snapshots.

        Args:
            stage: Stage name (e.g., "smoothing", "mixing")
            input_data: Input data to transformation
            output_data: Output data from transformation
            metadata: Additional metadata to log
        """
        log_data = {
            "stage": stage,
            "memory_mb": get_memory_usage()
        }

        if input_data is not None:
            log_data["input"] = self.snapshot_processor.process_data(input_data)

        if output_data is not None:
            log_data["output"] = self.snapshot_processor.process_data(output_data)

        if metadata:
            log_data.update(metadata)

        self.logger.info("data_transform", **log_data)

    def log_quality_warning(
        self,
        stage: str,
        reason: str,
        context: Optional[Dict] = None
    ):
        """
        Log a result-quality signal (e.g. an empty classifier set).

        Args:
            stage: Stage that produced the degraded result
            reason: Description of the condition
            context: Additional context
        """
        log_data = {
            "stage": stage,
            "reason": reason,
        }

        if context:
            log_data.update(context)

        self.logger.warning("result_quality", **log_data)
