"""
Neural DTOs

Immutable visual state of the spiking network, one snapshot per tick.

CONTRACT:
=========
- Positions are assigned upstream and never recomputed here
- A snapshot is superseded by the next one, never edited
- Every connection endpoint resolves to a neuron of the same snapshot
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .core import DTOVersion, ActivationState


@dataclass(frozen=True)
class VisualNeuron:
    """A positioned, classified neuron."""
    neuron_id: str
    position: Tuple[float, float, float]
    layer: str
    size: float
    state: ActivationState
    activation_level: float
    anomaly_level: float
    connections: Tuple[str, ...] = ()

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def z(self) -> float:
        return self.position[2]


@dataclass(frozen=True)
class VisualConnection:
    """A classified synapse between two visual neurons."""
    connection_id: str
    source_id: str
    target_id: str
    strength: float
    active: bool
    highlighted: bool


@dataclass(frozen=True)
class NeuralActivityState:
    """Summary consumed by the neural activity indicator."""
    anomaly_score: float
    active_neurons: int
    total_neurons: int
    is_analysis_active: bool
    active_threats: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'anomalyScore': self.anomaly_score,
            'activeNeurons': self.active_neurons,
            'totalNeurons': self.total_neurons,
            'isAnalysisActive': self.is_analysis_active,
            'activeThreats': self.active_threats,
        }


@dataclass(frozen=True)
class VisualSnapshot:
    """
    Full visual state for one projection cycle.

    IMMUTABLE:
    ==========
    Published once, then only read. The next cycle builds a new snapshot.
    """
    neurons: Tuple[VisualNeuron, ...]
    connections: Tuple[VisualConnection, ...]
    anomaly_score: float
    is_analysis_active: bool
    active_threats: int
    generated_at: float = 0.0  # epoch milliseconds of the projection
    dto_version: DTOVersion = field(default=DTOVersion.V1)

    def __post_init__(self):
        if self.dto_version != DTOVersion.current():
            raise ValueError(f"Unknown DTO version: {self.dto_version}")

    @classmethod
    def empty(cls) -> 'VisualSnapshot':
        """Initial state before the first projection."""
        return cls(
            neurons=(),
            connections=(),
            anomaly_score=0.0,
            is_analysis_active=False,
            active_threats=0,
        )

    @property
    def active_neuron_count(self) -> int:
        return sum(1 for n in self.neurons if n.state is ActivationState.ACTIVE)

    def activity_state(self) -> NeuralActivityState:
        return NeuralActivityState(
            anomaly_score=self.anomaly_score,
            active_neurons=self.active_neuron_count,
            total_neurons=len(self.neurons),
            is_analysis_active=self.is_analysis_active,
            active_threats=self.active_threats,
        )
