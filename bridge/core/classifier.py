"""
State Classifier

Maps continuous simulation state into discrete visual categories.
The thresholds are fixed design constants, not configuration.
"""

from __future__ import annotations
from typing import Final, Optional

from display.dtos import ActivationState


ACTIVATION_RATIO: Final[float] = 0.6
ACTIVE_WINDOW_MS: Final[float] = 200.0
HIGHLIGHT_PLASTICITY: Final[float] = 0.5
ANOMALY_SIZE_THRESHOLD: Final[float] = 0.5
ANOMALOUS_SIZE: Final[float] = 1.5
NORMAL_SIZE: Final[float] = 1.0


class StateClassifier:
    """Stateless classification rules for neurons and synapses."""

    def neuron_state(
        self,
        potential: float,
        threshold: float,
        is_refractory: bool,
    ) -> ActivationState:
        """Refractory wins; otherwise active above 0.6 x threshold."""
        if is_refractory:
            return ActivationState.REFRACTORY
        if potential > threshold * ACTIVATION_RATIO:
            return ActivationState.ACTIVE
        return ActivationState.INACTIVE

    def connection_active(self, last_activation: Optional[float], now: float) -> bool:
        """True iff the synapse fired less than 200 ms before ``now``."""
        if last_activation is None:
            return False
        return now - last_activation < ACTIVE_WINDOW_MS

    def connection_highlighted(self, plasticity: float) -> bool:
        return plasticity > HIGHLIGHT_PLASTICITY

    def activation_level(self, potential: float, threshold: float) -> float:
        # Non-positive thresholds come from uninitialised neurons
        if threshold <= 0:
            return 0.0
        return potential / threshold

    def size_multiplier(self, anomaly_contribution: float) -> float:
        if anomaly_contribution > ANOMALY_SIZE_THRESHOLD:
            return ANOMALOUS_SIZE
        return NORMAL_SIZE
