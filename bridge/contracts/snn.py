"""
Simulation Contracts

Shapes consumed from the anomaly-detection collaborator's spiking network.
The bridge never produces or edits these; it only reads them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from .base import NeuronLayer


def _required(payload: Mapping[str, Any], *keys: str) -> str:
    """First non-empty value among ``keys``; ValueError if there is none."""
    for key in keys:
        value = payload.get(key)
        if value is not None and value != '':
            return str(value)
    raise ValueError(f"Payload is missing {keys[0]!r}: {dict(payload)!r}")


@dataclass(frozen=True)
class Neuron:
    """Point-in-time state of one neuron."""
    neuron_id: str
    potential: float
    threshold: float
    is_refractory: bool
    layer: str                        # layer tag, see NeuronLayer
    index: int                        # ordinal within its layer
    anomaly_contribution: float = 0.0
    connections: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'Neuron':
        """
        Build a Neuron from the collaborator's payload.

        The layer comes from an explicit ``layer`` tag when present,
        otherwise from ``type`` + ``layerIndex``.
        """
        layer = payload.get('layer')
        if layer is None:
            layer = NeuronLayer.from_kind(
                payload.get('type', 'input'),
                int(payload.get('layerIndex', payload.get('layer_index', 0)) or 0),
            ).value

        return cls(
            neuron_id=_required(payload, 'id', 'neuron_id'),
            potential=float(payload.get('potential', 0.0)),
            threshold=float(payload.get('threshold', 1.0)),
            is_refractory=bool(payload.get('isRefractory', payload.get('is_refractory', False))),
            layer=str(layer.value if isinstance(layer, NeuronLayer) else layer),
            index=int(payload.get('index', 0)),
            anomaly_contribution=float(
                payload.get('anomalyContribution', payload.get('anomaly_contribution', 0.0))
            ),
            connections=tuple(str(c) for c in payload.get('connections', ()) or ()),
        )


@dataclass(frozen=True)
class SynapticConnection:
    """Point-in-time state of one synapse."""
    connection_id: str
    source_id: str
    target_id: str
    weight: float
    plasticity: float = 0.0
    last_activation: Optional[float] = None  # epoch ms, None if never fired

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'SynapticConnection':
        last = payload.get('lastActivation', payload.get('last_activation'))
        return cls(
            connection_id=_required(payload, 'id', 'connection_id'),
            source_id=_required(payload, 'sourceId', 'source_id'),
            target_id=_required(payload, 'targetId', 'target_id'),
            weight=float(payload.get('weight', 0.0)),
            plasticity=float(payload.get('plasticity', 0.0)),
            last_activation=float(last) if last is not None else None,
        )


@dataclass(frozen=True)
class SimulationSnapshot:
    """One tick of the spiking network."""
    neurons: Tuple[Neuron, ...]
    connections: Tuple[SynapticConnection, ...]
    anomaly_score: float = 0.0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'SimulationSnapshot':
        return cls(
            neurons=tuple(Neuron.from_payload(n) for n in payload.get('neurons', ())),
            connections=tuple(
                SynapticConnection.from_payload(c) for c in payload.get('connections', ())
            ),
            anomaly_score=float(payload.get('anomalyScore', payload.get('anomaly_score', 0.0))),
        )
