"""
Wide Events (Canonical Log Lines) - Structured Logging Utility

Each top-level computation (car report, fleet statistics, chart data) emits
ONE structured event instead of a trail of log lines (rendered as JSON once
the host calls fleetstats.configure_logging):
- Record counts and interval counts as business metrics
- Data-quality counters (non-numeric fields, rejected distances, stale intervals)
- Duration and success/failure
- Tail sampling: keep all failures and every event that excluded data,
  sample clean successful computations
"""

import random
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

from ..config import Config

# Business metrics that always force emission when non-zero
DATA_QUALITY_METRICS = (
    "skipped_non_numeric",
    "skipped_distance",
    "skipped_stale",
    "skipped_undated",
)


class WideEvent:
    """
    Accumulates context throughout a computation, then emits one log event.

    Usage:
        event = WideEvent("fleet_stats")
        event.add_context(consumption_unit="L/100km")
        event.add_business_metric("fuel_entries", 42)

        with event.timer("intervals"):
            build_fleet_intervals(entries)

        event.emit()
    """

    def __init__(self, operation: str, request_id: Optional[str] = None, trace_id: Optional[str] = None):
        """
        Initialize a wide event for a specific operation.

        Args:
            operation: Name of the operation (e.g., "fleet_stats")
            request_id: Unique ID for this computation (auto-generated if not provided)
            trace_id: ID that connects related computations (e.g., one dashboard render)
        """
        self.operation = operation
        self.context: Dict[str, Any] = {
            "service": "fleetstats",
            "operation": operation,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "start_time": time.time(),
            "request_id": request_id or str(uuid.uuid4()),
        }

        if trace_id:
            self.context["trace_id"] = trace_id

        self.logger = structlog.get_logger("fleetstats.events")

    def add_context(self, **kwargs) -> "WideEvent":
        """Add high-cardinality context fields (car_id, consumption_unit, etc.)."""
        self.context.update(kwargs)
        return self

    def add_business_metric(self, key: str, value: Any) -> "WideEvent":
        """Add business metrics (entries processed, intervals built, skipped counts)."""
        if "business_metrics" not in self.context:
            self.context["business_metrics"] = {}
        self.context["business_metrics"][key] = value
        return self

    def add_business_metrics(self, metrics: Dict[str, Any]) -> "WideEvent":
        """Add several business metrics at once."""
        for key, value in metrics.items():
            self.add_business_metric(key, value)
        return self

    def add_error(self, error: Exception, **kwargs) -> "WideEvent":
        """Add error details to the event."""
        self.context["error"] = {
            "type": type(error).__name__,
            "message": str(error),
            "details": kwargs,
        }
        self.context["success"] = False
        return self

    def mark_success(self) -> "WideEvent":
        """Mark the operation as successful."""
        self.context["success"] = True
        return self

    def mark_failure(self, reason: str) -> "WideEvent":
        """Mark the operation as failed."""
        self.context["success"] = False
        self.context["failure_reason"] = reason
        return self

    @contextmanager
    def timer(self, operation_name: str):
        """
        Context manager to time a step of the computation.

        Outputs: {"performance_breakdown": {"intervals_ms": 1.2}}
        """
        start = time.time()
        try:
            yield
        finally:
            duration_ms = (time.time() - start) * 1000
            if "performance_breakdown" not in self.context:
                self.context["performance_breakdown"] = {}
            self.context["performance_breakdown"][f"{operation_name}_ms"] = round(duration_ms, 2)

    def set_duration(self) -> "WideEvent":
        """Calculate and set the duration of the operation."""
        if "start_time" in self.context:
            duration_ms = (time.time() - self.context["start_time"]) * 1000
            self.context["duration_ms"] = round(duration_ms, 2)
            del self.context["start_time"]
        return self

    def should_emit(self, sample_rate: Optional[float] = None, slow_threshold_ms: float = 1000) -> bool:
        """
        Tail sampling:
        - Always emit failures
        - Always emit slow computations (>slow_threshold_ms)
        - Always emit computations that excluded records
        - Sample clean, fast computations at sample_rate
        """
        if sample_rate is None:
            sample_rate = Config.EVENT_SAMPLE_RATE

        if not self.context.get("success", True):
            return True

        if self.context.get("duration_ms", 0) > slow_threshold_ms:
            return True

        business_metrics = self.context.get("business_metrics", {})
        if any(business_metrics.get(metric) for metric in DATA_QUALITY_METRICS):
            return True

        return random.random() < sample_rate

    def emit(self, level: str = "info", force: bool = False) -> None:
        """
        Emit the wide event as a single comprehensive log line.

        Args:
            level: Log level (info, warning, error)
            force: Force emission even if sampling says no
        """
        self.set_duration()

        if not force and not self.should_emit():
            return

        log_method = getattr(self.logger, level, self.logger.info)
        log_method(
            f"{self.operation}_complete",
            **self.context,
        )


@contextmanager
def track_operation(operation: str, **initial_context):
    """
    Context manager for tracking a computation with a wide event.

    Usage:
        with track_operation("car_report", car_id="car1") as event:
            event.add_business_metric("intervals", 12)
            # Event is considered for emission on exit
    """
    event = WideEvent(operation)
    event.add_context(**initial_context)

    try:
        yield event
        event.mark_success()
    except Exception as e:
        event.add_error(e)
        event.mark_failure(str(e))
        raise
    finally:
        failed = not event.context.get("success", True)
        event.emit(level="error" if failed else "info", force=failed)
