"""
State Projector

Turns one simulation snapshot into one immutable visual snapshot.

PROJECTION RULES:
=================
1. Neuron position comes from the PositionCache (id, layer, index);
   the published layer is the canonical tag, whatever spelling arrived
2. Neuron and synapse categories come from the StateClassifier
3. Synapses whose endpoints are not neurons of the same snapshot are dropped
4. Aggregates are copied from the snapshot and the caller's status query

A pure function of its inputs plus the cache's memory: deterministic
once the cache holds every id in the snapshot.
"""

from __future__ import annotations
from typing import Iterable, Optional, Set, Tuple
import logging

from display.dtos import VisualNeuron, VisualConnection, VisualSnapshot

from ..contracts.base import ErrorCode, NeuronLayer
from ..contracts.snn import Neuron, SynapticConnection, SimulationSnapshot
from ..observability import MetricsCollector
from .classifier import StateClassifier
from .positions import PositionCache

logger = logging.getLogger(__name__)


class StateProjector:
    """Combines PositionCache and StateClassifier into visual snapshots."""

    def __init__(
        self,
        positions: PositionCache,
        classifier: Optional[StateClassifier] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self._positions = positions
        self._classifier = classifier or StateClassifier()
        self._metrics = metrics

    def project(
        self,
        snapshot: SimulationSnapshot,
        now: float,
        *,
        is_analysis_active: bool = False,
        active_threats: int = 0,
    ) -> VisualSnapshot:
        """
        Project ``snapshot`` as seen at ``now`` (epoch milliseconds).

        Raises:
            LayerConfigurationError: a neuron carries an unknown layer tag
        """
        neurons = tuple(self._map_neuron(n) for n in snapshot.neurons)
        known: Set[str] = {n.neuron_id for n in neurons}
        connections = self._map_connections(snapshot.connections, known, now)

        if self._metrics is not None:
            self._metrics.record("positions_cached", float(len(self._positions)))

        return VisualSnapshot(
            neurons=neurons,
            connections=connections,
            anomaly_score=snapshot.anomaly_score,
            is_analysis_active=is_analysis_active,
            active_threats=active_threats,
            generated_at=now,
        )

    # =========================================================================
    # NEURONS
    # =========================================================================

    def _map_neuron(self, neuron: Neuron) -> VisualNeuron:
        position = self._positions.position(neuron.neuron_id, neuron.layer, neuron.index)
        classifier = self._classifier

        return VisualNeuron(
            neuron_id=neuron.neuron_id,
            position=position,
            layer=NeuronLayer.parse(neuron.layer).value,
            size=classifier.size_multiplier(neuron.anomaly_contribution),
            state=classifier.neuron_state(
                neuron.potential, neuron.threshold, neuron.is_refractory
            ),
            activation_level=classifier.activation_level(neuron.potential, neuron.threshold),
            anomaly_level=neuron.anomaly_contribution,
            connections=neuron.connections,
        )

    # =========================================================================
    # CONNECTIONS
    # =========================================================================

    def _map_connections(
        self,
        connections: Iterable[SynapticConnection],
        known: Set[str],
        now: float,
    ) -> Tuple[VisualConnection, ...]:
        mapped = []
        dropped = 0
        for connection in connections:
            if connection.source_id not in known or connection.target_id not in known:
                dropped += 1
                logger.debug(
                    "Dropping synapse %s: endpoint %s -> %s not in snapshot",
                    connection.connection_id, connection.source_id, connection.target_id,
                )
                continue

            mapped.append(VisualConnection(
                connection_id=connection.connection_id,
                source_id=connection.source_id,
                target_id=connection.target_id,
                strength=connection.weight,
                active=self._classifier.connection_active(connection.last_activation, now),
                highlighted=self._classifier.connection_highlighted(connection.plasticity),
            ))

        if dropped and self._metrics is not None:
            self._metrics.record("dangling_connections_dropped", float(dropped))
            self._metrics.error(
                ErrorCode.DANGLING_CONNECTION,
                f"{dropped} synapse(s) referenced neurons outside the snapshot",
            )

        return tuple(mapped)
