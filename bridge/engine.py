"""
Bridge Orchestration Module

Connects the anomaly-detection collaborator to downstream renderers.

FLOW:
=====
1. Detector emits a SimulationSnapshot
2. StateProjector builds a VisualSnapshot (PositionCache + StateClassifier)
3. EventHub publishes it on VISUAL_STATE
4. Anomaly, threat and status events are forwarded to their own channels

Each snapshot arrival triggers exactly one synchronous
projection-and-publish cycle. Nothing suspends mid-cycle.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional
import logging
import time

from display.dtos import VisualSnapshot, NeuralActivityState

from .contracts.base import ErrorCode
from .contracts.detector import AnomalyDetector
from .contracts.snn import SimulationSnapshot
from .core.classifier import StateClassifier
from .core.positions import PositionCache, SeededJitter, DEFAULT_JITTER
from .core.projector import StateProjector
from .hub import Channel, EventHub, Subscription
from .observability import MetricsCollector, ObservabilityConfig
from .temporal.clock import LogicalClock

logger = logging.getLogger(__name__)


@dataclass
class BridgeConfig:
    """Unified configuration for the bridge."""
    position_seed: int = 0
    jitter_amplitude: float = DEFAULT_JITTER
    observability: ObservabilityConfig = None

    def __post_init__(self):
        self.observability = self.observability or ObservabilityConfig()


class VisualizationBridge:
    """
    Adapts the detector's outputs for the visualization components.

    The EventHub, PositionCache and clock are created here unless passed
    in; passing them lets several consumers share one hub, or tests pin
    the clock.
    """

    def __init__(
        self,
        detector: AnomalyDetector,
        config: Optional[BridgeConfig] = None,
        hub: Optional[EventHub] = None,
        positions: Optional[PositionCache] = None,
        clock: Optional[LogicalClock] = None,
    ):
        self._config = config or BridgeConfig()
        self._detector = detector
        self._hub = hub if hub is not None else EventHub()
        self._clock = clock if clock is not None else LogicalClock.live(record=False)
        self._metrics = MetricsCollector(self._config.observability)
        self._positions = positions if positions is not None else PositionCache(
            jitter=SeededJitter(self._config.position_seed),
            jitter_amplitude=self._config.jitter_amplitude,
        )
        self._projector = StateProjector(self._positions, StateClassifier(), self._metrics)
        self._visual_state = VisualSnapshot.empty()

        detector.subscribe_to_snn_state(self._on_snn_state)
        detector.subscribe_to_anomalies(lambda a: self._hub.publish(Channel.ANOMALY, a))
        detector.subscribe_to_threats(lambda t: self._hub.publish(Channel.THREAT, t))
        detector.subscribe_to_status(lambda s: self._hub.publish(Channel.PIPELINE_STATUS, s))

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start_analysis(self, interface: Optional[str] = None) -> bool:
        """Start the detection pipeline. Returns the detector's answer."""
        started = bool(self._detector.start(interface))
        if started:
            logger.info("Analysis started on %s", interface or "default interface")
        else:
            logger.warning("Detector refused to start on %s", interface or "default interface")
            self._metrics.error(
                ErrorCode.DETECTOR_START_FAILED,
                "Detector start returned False",
                interface=interface or "",
            )
        return started

    def stop_analysis(self) -> None:
        self._detector.stop()
        logger.info("Analysis stopped")

    # =========================================================================
    # PROJECTION
    # =========================================================================

    def _on_snn_state(self, snapshot: SimulationSnapshot) -> None:
        started = time.perf_counter()
        status = self._detector.get_status()

        visual = self._projector.project(
            snapshot,
            self._clock.now(),
            is_analysis_active=bool(status.is_processing),
            active_threats=int(self._detector.get_active_threats_count()),
        )
        self._visual_state = visual

        self._metrics.record("projection_cycles_total", 1.0)
        self._metrics.record(
            "projection_duration_ms", (time.perf_counter() - started) * 1000.0
        )
        self._hub.publish(Channel.VISUAL_STATE, visual)

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe_to_visual_state(self, callback: Callable[[VisualSnapshot], None]) -> Subscription:
        """Late subscribers immediately receive the current snapshot."""
        return self._hub.subscribe(Channel.VISUAL_STATE, callback)

    def subscribe_to_anomalies(self, callback: Callable[[Any], None]) -> Subscription:
        return self._hub.subscribe(Channel.ANOMALY, callback)

    def subscribe_to_threats(self, callback: Callable[[Any], None]) -> Subscription:
        return self._hub.subscribe(Channel.THREAT, callback)

    def subscribe_to_status(self, callback: Callable[[Any], None]) -> Subscription:
        return self._hub.subscribe(Channel.PIPELINE_STATUS, callback)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_visual_state(self) -> VisualSnapshot:
        """Copy of the current snapshot (empty before the first tick)."""
        return replace(self._visual_state)

    def get_neural_activity_state(self) -> NeuralActivityState:
        return self._visual_state.activity_state()

    @property
    def hub(self) -> EventHub:
        return self._hub

    @property
    def positions(self) -> PositionCache:
        return self._positions

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics
