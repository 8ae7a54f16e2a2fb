"""
Discrete Event Contracts

Events emitted by the anomaly-detection collaborator and forwarded,
unchanged, to downstream subscribers.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Anomaly:
    """A scored deviation observed by the detector."""
    anomaly_id: str
    score: float
    detected_at: float           # epoch milliseconds
    source: str = ""
    description: str = ""


@dataclass(frozen=True)
class ThreatDetection:
    """A threat raised from one or more anomalies."""
    threat_id: str
    severity: str
    confidence: float
    detected_at: float           # epoch milliseconds
    anomaly_ids: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""


@dataclass(frozen=True)
class PipelineStatus:
    """Progress report of the detection pipeline."""
    stage: str
    is_processing: bool
    packets_processed: int = 0
    message: str = ""


@dataclass(frozen=True)
class DetectorStatus:
    """Answer to the detector's live status query."""
    is_processing: bool
    interface: str = ""
    uptime_ms: float = 0.0
