"""
Pipeline Test Fixtures

Explicit, deterministic builders for simulation snapshots and a fake
detector that records calls and lets tests push values by hand.
"""

from typing import Callable, List, Optional, Sequence

from bridge.contracts import (
    DetectorStatus, Neuron, SimulationSnapshot, SynapticConnection,
)


# =============================================================================
# FIXED TIMESTAMPS (epoch milliseconds)
# =============================================================================

NOW = 1_767_225_600_000.0   # 2026-01-01T00:00:00Z


# =============================================================================
# BUILDERS
# =============================================================================

def make_neuron(
    neuron_id: str,
    layer: str = "input",
    index: int = 0,
    potential: float = 0.0,
    threshold: float = 100.0,
    refractory: bool = False,
    anomaly: float = 0.0,
    connections: Sequence[str] = (),
) -> Neuron:
    return Neuron(
        neuron_id=neuron_id,
        potential=potential,
        threshold=threshold,
        is_refractory=refractory,
        layer=layer,
        index=index,
        anomaly_contribution=anomaly,
        connections=tuple(connections),
    )


def make_connection(
    source: str,
    target: str,
    weight: float = 0.5,
    plasticity: float = 0.0,
    last_activation: Optional[float] = None,
    connection_id: Optional[str] = None,
) -> SynapticConnection:
    return SynapticConnection(
        connection_id=connection_id or f"{source}->{target}",
        source_id=source,
        target_id=target,
        weight=weight,
        plasticity=plasticity,
        last_activation=last_activation,
    )


def small_network(anomaly_score: float = 0.25) -> SimulationSnapshot:
    """Three neurons across three layers, two synapses, one dangling."""
    neurons = (
        make_neuron("in-0", "input", 0, potential=70.0, connections=("in-0->h-0",)),
        make_neuron("h-0", "hidden1", 0, potential=80.0, threshold=200.0, anomaly=0.8),
        make_neuron("out-0", "output", 0, refractory=True, potential=99.0),
    )
    connections = (
        make_connection("in-0", "h-0", weight=0.9, plasticity=0.7, last_activation=NOW - 150),
        make_connection("h-0", "out-0", weight=-0.2, plasticity=0.2, last_activation=NOW - 250),
        make_connection("h-0", "ghost", weight=0.1),
    )
    return SimulationSnapshot(neurons=neurons, connections=connections, anomaly_score=anomaly_score)


# =============================================================================
# FAKE DETECTOR
# =============================================================================

class FakeDetector:
    """AnomalyDetector stand-in driven entirely by the test."""

    def __init__(self, start_result: bool = True, processing: bool = True, threats: int = 0):
        self.start_result = start_result
        self.processing = processing
        self.threats = threats
        self.start_calls: List[Optional[str]] = []
        self.stop_calls = 0
        self.snn: List[Callable] = []
        self.anomalies: List[Callable] = []
        self.threat_callbacks: List[Callable] = []
        self.status: List[Callable] = []

    def start(self, interface=None):
        self.start_calls.append(interface)
        return self.start_result

    def stop(self):
        self.stop_calls += 1

    def subscribe_to_snn_state(self, callback):
        self.snn.append(callback)

    def subscribe_to_anomalies(self, callback):
        self.anomalies.append(callback)

    def subscribe_to_threats(self, callback):
        self.threat_callbacks.append(callback)

    def subscribe_to_status(self, callback):
        self.status.append(callback)

    def get_status(self):
        return DetectorStatus(is_processing=self.processing)

    def get_active_threats_count(self):
        return self.threats

    # Test drivers

    def emit_snapshot(self, snapshot: SimulationSnapshot):
        for callback in self.snn:
            callback(snapshot)

    def emit_anomaly(self, anomaly):
        for callback in self.anomalies:
            callback(anomaly)

    def emit_threat(self, threat):
        for callback in self.threat_callbacks:
            callback(threat)

    def emit_status(self, status):
        for callback in self.status:
            callback(status)
