"""
Projection Core

PositionCache, StateClassifier and StateProjector: the pieces that turn
a simulation snapshot into a visual snapshot.
"""

from .positions import (
    PositionCache, LayerBand, SeededJitter, JitterSource, DEFAULT_LAYER_TABLE,
)
from .classifier import StateClassifier
from .projector import StateProjector

__all__ = [
    'PositionCache', 'LayerBand', 'SeededJitter', 'JitterSource', 'DEFAULT_LAYER_TABLE',
    'StateClassifier', 'StateProjector',
]
