"""
Detector Contract

The surface the bridge consumes from the anomaly-detection collaborator.
Any object with these methods can drive the bridge; the simulation behind
it is not the bridge's concern.
"""

from __future__ import annotations
from typing import Callable, Optional, Protocol

from .snn import SimulationSnapshot
from .events import Anomaly, ThreatDetection, PipelineStatus, DetectorStatus


class AnomalyDetector(Protocol):

    def start(self, interface: Optional[str] = None) -> bool:
        """Start capture and analysis. False if the detector could not start."""
        ...

    def stop(self) -> None:
        ...

    def subscribe_to_snn_state(self, callback: Callable[[SimulationSnapshot], None]) -> None:
        ...

    def subscribe_to_anomalies(self, callback: Callable[[Anomaly], None]) -> None:
        ...

    def subscribe_to_threats(self, callback: Callable[[ThreatDetection], None]) -> None:
        ...

    def subscribe_to_status(self, callback: Callable[[PipelineStatus], None]) -> None:
        ...

    def get_status(self) -> DetectorStatus:
        ...

    def get_active_threats_count(self) -> int:
        ...
