"""
Position Cache
==============

Stable 3-D coordinates for every entity identifier.

GUARANTEES:
===========
- First sight of an id computes and stores a coordinate
- Every later query for that id returns the stored value unchanged
- Jitter is derived from (seed, id, layer, index) only, so identical
  inputs yield identical coordinates across runs and call orders
- Entries are never evicted
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Final, Iterator, Mapping, Optional, Protocol, Tuple
import hashlib
import math

import numpy as np

from ..contracts.base import LayerConfigurationError, NeuronLayer


Position = Tuple[float, float, float]

ANGLE_DIVISIONS: Final[int] = 10
DEFAULT_JITTER: Final[float] = 20.0


# =============================================================================
# LAYER TABLE
# =============================================================================

@dataclass(frozen=True)
class LayerBand:
    """Depth band and planar radius of one layer."""
    min_z: float
    max_z: float
    radius: float


DEFAULT_LAYER_TABLE: Final[Mapping[NeuronLayer, LayerBand]] = {
    NeuronLayer.INPUT: LayerBand(min_z=-300.0, max_z=-200.0, radius=300.0),
    NeuronLayer.HIDDEN1: LayerBand(min_z=-100.0, max_z=0.0, radius=250.0),
    NeuronLayer.HIDDEN2: LayerBand(min_z=100.0, max_z=200.0, radius=200.0),
    NeuronLayer.OUTPUT: LayerBand(min_z=300.0, max_z=400.0, radius=150.0),
}


# =============================================================================
# JITTER SOURCES
# =============================================================================

class JitterSource(Protocol):
    """Supplies three uniform draws in [0, 1) for one entity."""

    def draw(self, entity_id: str, layer: NeuronLayer, index: int) -> Tuple[float, float, float]:
        ...


class SeededJitter:
    """
    Deterministic jitter keyed by entity.

    Each entity gets its own numpy Generator seeded from a SHA-256 digest
    of (seed, id, layer, index).
    """

    def __init__(self, seed: int = 0):
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def draw(self, entity_id: str, layer: NeuronLayer, index: int) -> Tuple[float, float, float]:
        digest = hashlib.sha256(
            f"{self._seed}|{entity_id}|{layer.value}|{index}".encode()
        ).digest()
        rng = np.random.default_rng(int.from_bytes(digest[:8], 'big'))
        z, x, y = rng.random(3)
        return float(z), float(x), float(y)


# =============================================================================
# CACHE
# =============================================================================

class PositionCache:
    """
    Assigns and remembers a coordinate per entity id.

    Written only by ``position`` on first sight of an id; the stored tuple
    is immutable, so reads of populated ids need no coordination.
    """

    def __init__(
        self,
        jitter: Optional[JitterSource] = None,
        layer_table: Optional[Mapping[NeuronLayer, LayerBand]] = None,
        jitter_amplitude: float = DEFAULT_JITTER,
    ):
        table = dict(layer_table if layer_table is not None else DEFAULT_LAYER_TABLE)
        missing = [layer.value for layer in NeuronLayer if layer not in table]
        if missing:
            raise LayerConfigurationError(
                f"Layer table has no entry for: {', '.join(missing)}"
            )

        self._table = table
        self._jitter = jitter if jitter is not None else SeededJitter()
        self._amplitude = jitter_amplitude
        self._positions: Dict[str, Position] = {}

    def position(self, entity_id: str, layer: object, index: int) -> Position:
        """
        Return the coordinate of ``entity_id``, computing it on first sight.

        The tag is validated on every call, including for cached ids.

        Raises:
            LayerConfigurationError: ``layer`` is not a known layer tag
        """
        resolved = NeuronLayer.parse(layer)
        cached = self._positions.get(entity_id)
        if cached is not None:
            return cached

        band = self._band(resolved)
        u_z, u_x, u_y = self._jitter.draw(entity_id, resolved, index)

        z = band.min_z + u_z * (band.max_z - band.min_z)
        angle = (index / ANGLE_DIVISIONS) * math.pi * 2
        x = math.cos(angle) * band.radius + (u_x * 2 - 1) * self._amplitude
        y = math.sin(angle) * band.radius + (u_y * 2 - 1) * self._amplitude

        coordinate = (x, y, z)
        self._positions[entity_id] = coordinate
        return coordinate

    def get(self, entity_id: str) -> Optional[Position]:
        """Cached coordinate, or None if the id was never seen."""
        return self._positions.get(entity_id)

    def known_ids(self) -> Tuple[str, ...]:
        return tuple(self._positions)

    def _band(self, layer: NeuronLayer) -> LayerBand:
        try:
            return self._table[layer]
        except KeyError:
            raise LayerConfigurationError(f"No layer band configured for {layer.value!r}") from None

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)
