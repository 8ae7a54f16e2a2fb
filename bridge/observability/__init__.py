"""
Observability Layer

RESPONSIBILITY: Metrics and error records for the projection pipeline
ALLOWED INPUTS: Counters, timings and Error values from bridge components
OUTPUTS: MetricPoint series, Error log

WHAT THIS LAYER MUST NOT DO:
============================
- Modify pipeline behavior
- Block or delay a projection cycle
- Raise on unknown metric names (they are registered on first use)
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Tuple
import time

import numpy as np

from ..contracts.base import Error, ErrorCode


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class ObservabilityConfig:
    """Configuration for the observability layer."""
    enabled: bool = True
    max_points_per_metric: int = 1000
    max_errors: int = 500


# =============================================================================
# METRICS COLLECTOR
# =============================================================================

class MetricType(Enum):
    """Types of metrics collected."""
    COUNTER = "counter"
    GAUGE = "gauge"
    TIMING = "timing"


@dataclass
class MetricDefinition:
    """Definition of a metric to collect."""
    name: str
    metric_type: MetricType
    description: str
    labels: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MetricPoint:
    """One recorded value."""
    metric_name: str
    value: float
    timestamp: float  # epoch milliseconds
    labels: Tuple[Tuple[str, str], ...] = ()


class MetricsCollector:
    """
    Collect metrics from the bridge.

    Each series is a bounded ring; the oldest points fall off first.
    """

    def __init__(
        self,
        config: Optional[ObservabilityConfig] = None,
        time_source: Optional[Callable[[], float]] = None,
    ):
        self._config = config or ObservabilityConfig()
        self._time_source = time_source or (lambda: time.time() * 1000.0)
        self._metrics: Dict[str, Deque[MetricPoint]] = {}
        self._definitions: Dict[str, MetricDefinition] = {}
        self._counters: Dict[str, float] = {}  # cumulative, never trimmed
        self._errors: Deque[Error] = deque(maxlen=self._config.max_errors)
        self._register_default_metrics()

    def _register_default_metrics(self):
        defaults = [
            MetricDefinition(
                name="projection_cycles_total",
                metric_type=MetricType.COUNTER,
                description="Number of simulation snapshots projected",
            ),
            MetricDefinition(
                name="projection_duration_ms",
                metric_type=MetricType.TIMING,
                description="Wall time of one projection cycle in milliseconds",
            ),
            MetricDefinition(
                name="dangling_connections_dropped",
                metric_type=MetricType.COUNTER,
                description="Synapses dropped because an endpoint neuron was absent",
            ),
            MetricDefinition(
                name="dangling_communications_dropped",
                metric_type=MetricType.COUNTER,
                description="Communications dropped because an endpoint device was absent",
            ),
            MetricDefinition(
                name="positions_cached",
                metric_type=MetricType.GAUGE,
                description="Number of entity ids with a cached coordinate",
            ),
        ]
        for definition in defaults:
            self.register_metric(definition)

    def register_metric(self, definition: MetricDefinition):
        self._definitions[definition.name] = definition
        if definition.name not in self._metrics:
            self._metrics[definition.name] = deque(maxlen=self._config.max_points_per_metric)

    def record(
        self,
        metric_name: str,
        value: float,
        labels: Optional[Dict[str, str]] = None
    ):
        """Record a metric data point."""
        if not self._config.enabled:
            return
        if metric_name not in self._metrics:
            self._metrics[metric_name] = deque(maxlen=self._config.max_points_per_metric)

        if self._is_counter(metric_name):
            self._counters[metric_name] = self._counters.get(metric_name, 0.0) + value

        label_tuple = tuple(sorted(labels.items())) if labels else ()
        self._metrics[metric_name].append(MetricPoint(
            metric_name=metric_name,
            value=value,
            timestamp=self._time_source(),
            labels=label_tuple,
        ))

    def record_error(self, error: Error):
        if self._config.enabled:
            self._errors.append(error)

    def error(self, code: ErrorCode, message: str, **context: str) -> Error:
        """Build, record and return an Error stamped with the current time."""
        err = Error(
            code=code,
            message=message,
            timestamp=self._time_source(),
            context=tuple(sorted((k, str(v)) for k, v in context.items())),
        )
        self.record_error(err)
        return err

    def definitions(self) -> List[MetricDefinition]:
        return list(self._definitions.values())

    def get_metric(self, metric_name: str) -> List[MetricPoint]:
        return list(self._metrics.get(metric_name, ()))

    def get_latest(self, metric_name: str) -> Optional[MetricPoint]:
        points = self._metrics.get(metric_name)
        return points[-1] if points else None

    def get_errors(self, code: Optional[ErrorCode] = None) -> List[Error]:
        if code is None:
            return list(self._errors)
        return [e for e in self._errors if e.code == code]

    def _is_counter(self, metric_name: str) -> bool:
        definition = self._definitions.get(metric_name)
        return definition is not None and definition.metric_type is MetricType.COUNTER

    def total(self, metric_name: str) -> float:
        """
        Sum of recorded values.

        Counters keep a running total since creation; other metrics sum
        only the retained window.
        """
        if self._is_counter(metric_name):
            return self._counters.get(metric_name, 0.0)
        return sum(p.value for p in self._metrics.get(metric_name, ()))

    def summarize(self, metric_name: str) -> Dict[str, float]:
        """
        count, min, max, mean and p95 over the retained window.

        ``total`` is the running total for counters (see ``total``).
        """
        values = np.fromiter((p.value for p in self._metrics.get(metric_name, ())), dtype=float)
        if values.size == 0:
            return {}

        return {
            "count": float(values.size),
            "total": float(self.total(metric_name)),
            "min": float(values.min()),
            "max": float(values.max()),
            "mean": float(values.mean()),
            "p95": float(np.percentile(values, 95)),
        }


__all__ = [
    'ObservabilityConfig', 'MetricType', 'MetricDefinition', 'MetricPoint',
    'MetricsCollector',
]
