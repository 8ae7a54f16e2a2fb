"""
Display DTO Package

Read-only, immutable Data Transfer Objects for renderer consumption.

BOUNDARY ENFORCEMENT:
=====================
1. All DTOs are frozen (immutable)
2. Top-level views are versioned
3. Renderers receive ONLY these types, never simulation internals
4. Unknown categories are an explicit enum member, never a lookup miss
"""

from .core import (
    DTOVersion,
    ActivationState,
    LinkStatus,
    DeviceCategory,
    NEUTRAL_GRAY,
    status_color,
    category_color,
)
from .neural import VisualNeuron, VisualConnection, VisualSnapshot, NeuralActivityState
from .device import Device, CommunicationRecord

__all__ = [
    # Enums & palettes
    'DTOVersion',
    'ActivationState',
    'LinkStatus',
    'DeviceCategory',
    'NEUTRAL_GRAY',
    'status_color',
    'category_color',
    # Neural
    'VisualNeuron',
    'VisualConnection',
    'VisualSnapshot',
    'NeuralActivityState',
    # Devices
    'Device',
    'CommunicationRecord',
]
