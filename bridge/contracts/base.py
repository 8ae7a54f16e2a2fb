"""
Base Contracts and Shared Types

Foundational types used across the bridge layer.

BOUNDARY ENFORCEMENT:
=====================
- All value types are frozen dataclasses or enums
- Referential problems are data (Error), never exceptions
- Configuration problems are exceptions, never data
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Tuple


# =============================================================================
# ERROR STATES
# =============================================================================

class ErrorCode(Enum):
    """
    Enumerated error states recorded by observability.

    None of these interrupt a projection cycle.
    """
    # Referential
    DANGLING_CONNECTION = auto()
    DANGLING_COMMUNICATION = auto()

    # Collaborator
    DETECTOR_START_FAILED = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error record.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: float  # epoch milliseconds
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )


class LayerConfigurationError(Exception):
    """
    Raised when a layer tag has no entry in the layer table.

    Fatal: the layer table is exhaustive over the classifier's output,
    so a miss means the two have drifted apart.
    """
    pass


# =============================================================================
# NEURON LAYERS
# =============================================================================

class NeuronLayer(Enum):
    """Layer classification of a neuron."""
    INPUT = "input"
    HIDDEN1 = "hidden1"
    HIDDEN2 = "hidden2"
    OUTPUT = "output"

    @classmethod
    def parse(cls, tag: object) -> 'NeuronLayer':
        """
        Parse a layer tag.

        Accepts the canonical value and the hyphen/underscore spellings
        (``hidden-1``, ``hidden_1``). Raises LayerConfigurationError otherwise.
        """
        if isinstance(tag, NeuronLayer):
            return tag
        normalized = str(tag).strip().lower().replace('-', '').replace('_', '')
        for member in cls:
            if member.value == normalized:
                return member
        raise LayerConfigurationError(f"Unknown neuron layer tag: {tag!r}")

    @classmethod
    def from_kind(cls, kind: str, layer_index: int = 0) -> 'NeuronLayer':
        """
        Derive the layer from a neuron kind and hidden-layer index.

        Hidden neurons in hidden-layer 0 belong to HIDDEN1, any other
        hidden-layer index to HIDDEN2.
        """
        normalized = str(kind).strip().lower()
        if normalized == 'input':
            return cls.INPUT
        if normalized == 'output':
            return cls.OUTPUT
        if normalized == 'hidden':
            return cls.HIDDEN1 if layer_index == 0 else cls.HIDDEN2
        raise LayerConfigurationError(f"Unknown neuron kind: {kind!r}")
