"""
Simulated Anomaly Detector
==========================

A small stand-in for the anomaly-detection collaborator, for demos and
the API server. It produces plausible spiking-network snapshots from a
seeded numpy generator; it does not detect anything.

Call ``tick()`` to advance one step and notify subscribers.
"""

from __future__ import annotations
from typing import Callable, List, Optional
import time

import numpy as np

from bridge.contracts import (
    Anomaly, DetectorStatus, Neuron, PipelineStatus, SimulationSnapshot,
    SynapticConnection, ThreatDetection,
)


LAYER_SIZES = (("input", 10), ("hidden1", 8), ("hidden2", 6), ("output", 3))


class SimulatedDetector:
    """Implements the AnomalyDetector protocol over a toy network."""

    def __init__(self, seed: int = 7, fail_start: bool = False):
        self._rng = np.random.default_rng(seed)
        self._fail_start = fail_start
        self._processing = False
        self._interface = ""
        self._started_at = 0.0
        self._step = 0
        self._threats = 0
        self._snn_callbacks: List[Callable] = []
        self._anomaly_callbacks: List[Callable] = []
        self._threat_callbacks: List[Callable] = []
        self._status_callbacks: List[Callable] = []

        self._neuron_ids = [
            (f"{layer}-{i}", layer, i) for layer, size in LAYER_SIZES for i in range(size)
        ]
        self._potentials = self._rng.uniform(0.0, 100.0, len(self._neuron_ids))
        self._last_fired = np.zeros(len(self._neuron_ids))

        self._synapses = []
        for (layer_a, size_a), (layer_b, size_b) in zip(LAYER_SIZES, LAYER_SIZES[1:]):
            for i in range(size_a):
                for j in range(size_b):
                    if self._rng.random() < 0.4:
                        self._synapses.append(
                            (f"{layer_a}-{i}", f"{layer_b}-{j}", float(self._rng.uniform(-1, 1)))
                        )

    # =========================================================================
    # AnomalyDetector protocol
    # =========================================================================

    def start(self, interface: Optional[str] = None) -> bool:
        if self._fail_start:
            return False
        self._processing = True
        self._interface = interface or "sim0"
        self._started_at = time.time() * 1000.0
        self._emit(self._status_callbacks, PipelineStatus(stage="capture", is_processing=True))
        return True

    def stop(self) -> None:
        self._processing = False
        self._emit(self._status_callbacks, PipelineStatus(stage="idle", is_processing=False))

    def subscribe_to_snn_state(self, callback: Callable[[SimulationSnapshot], None]) -> None:
        self._snn_callbacks.append(callback)

    def subscribe_to_anomalies(self, callback: Callable[[Anomaly], None]) -> None:
        self._anomaly_callbacks.append(callback)

    def subscribe_to_threats(self, callback: Callable[[ThreatDetection], None]) -> None:
        self._threat_callbacks.append(callback)

    def subscribe_to_status(self, callback: Callable[[PipelineStatus], None]) -> None:
        self._status_callbacks.append(callback)

    def get_status(self) -> DetectorStatus:
        uptime = time.time() * 1000.0 - self._started_at if self._processing else 0.0
        return DetectorStatus(is_processing=self._processing, interface=self._interface, uptime_ms=uptime)

    def get_active_threats_count(self) -> int:
        return self._threats

    # =========================================================================
    # SIMULATION
    # =========================================================================

    def tick(self, now: Optional[float] = None) -> SimulationSnapshot:
        """Advance one step and notify SNN subscribers."""
        now = time.time() * 1000.0 if now is None else now
        self._step += 1

        self._potentials += self._rng.normal(5.0, 15.0, len(self._potentials))
        fired = self._potentials > 100.0
        self._last_fired[fired] = now
        self._potentials[fired] = 0.0
        self._potentials = np.clip(self._potentials, 0.0, None)
        refractory = (now - self._last_fired) < 50.0

        contributions = self._rng.beta(2.0, 5.0, len(self._potentials))
        anomaly_score = float(contributions.mean())

        fired_at = {nid: self._last_fired[k] for k, (nid, _, _) in enumerate(self._neuron_ids)}
        connections = tuple(
            SynapticConnection(
                connection_id=f"{src}->{dst}",
                source_id=src,
                target_id=dst,
                weight=weight,
                plasticity=float(self._rng.random()),
                last_activation=float(fired_at[src]) if fired_at[src] > 0 else None,
            )
            for src, dst, weight in self._synapses
        )
        neurons = tuple(
            Neuron(
                neuron_id=nid,
                potential=float(self._potentials[k]),
                threshold=100.0,
                is_refractory=bool(refractory[k] and fired_at[nid] > 0),
                layer=layer,
                index=index,
                anomaly_contribution=float(contributions[k]),
                connections=tuple(c.connection_id for c in connections if c.source_id == nid),
            )
            for k, (nid, layer, index) in enumerate(self._neuron_ids)
        )

        snapshot = SimulationSnapshot(neurons=neurons, connections=connections, anomaly_score=anomaly_score)

        if anomaly_score > 0.35:
            anomaly = Anomaly(
                anomaly_id=f"anomaly-{self._step}",
                score=anomaly_score,
                detected_at=now,
                source=self._interface,
            )
            self._emit(self._anomaly_callbacks, anomaly)
            if anomaly_score > 0.4:
                self._threats += 1
                self._emit(self._threat_callbacks, ThreatDetection(
                    threat_id=f"threat-{self._step}",
                    severity="high",
                    confidence=anomaly_score,
                    detected_at=now,
                    anomaly_ids=(anomaly.anomaly_id,),
                ))

        self._emit(self._snn_callbacks, snapshot)
        return snapshot

    @staticmethod
    def _emit(callbacks, value) -> None:
        for callback in list(callbacks):
            callback(value)
