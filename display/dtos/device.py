"""
Device DTOs

Records produced by the packet/log capture collaborator.
Logical positions are unbounded and in an arbitrary scale; mapping them
into a drawing surface happens in the layout mapper, never here.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Tuple

from .core import DeviceCategory, LinkStatus


def _required(payload: Mapping[str, Any], *keys: str) -> str:
    """First non-empty value among ``keys``; ValueError if there is none."""
    for key in keys:
        value = payload.get(key)
        if value is not None and value != '':
            return str(value)
    raise ValueError(f"Payload is missing {keys[0]!r}: {dict(payload)!r}")


@dataclass(frozen=True)
class Device:
    """A monitored network device."""
    device_id: str
    device_type: str                 # raw label as captured
    status: LinkStatus
    position: Tuple[float, float]    # logical, unbounded
    active_connections: int = 0

    @property
    def category(self) -> DeviceCategory:
        return DeviceCategory.parse(self.device_type)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'Device':
        """Build a Device from the capture collaborator's payload."""
        position = payload.get('position') or {}
        if isinstance(position, Mapping):
            xy = (float(position.get('x', 0.0)), float(position.get('y', 0.0)))
        else:
            xy = (float(position[0]), float(position[1]))

        return cls(
            device_id=_required(payload, 'id', 'device_id'),
            device_type=str(payload.get('deviceType') or payload.get('device_type') or ''),
            status=LinkStatus.parse(payload.get('status', 'normal')),
            position=xy,
            active_connections=int(
                payload.get('activeConnections', payload.get('active_connections', 0)) or 0
            ),
        )


@dataclass(frozen=True)
class CommunicationRecord:
    """
    One observed communication between two devices.

    Records arrive most-recent-last; list order is the only ordering.
    """
    source_device: str
    destination_device: str
    protocol: str
    status: LinkStatus
    anomaly_score: float = 0.0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'CommunicationRecord':
        return cls(
            source_device=_required(payload, 'sourceDevice', 'source_device'),
            destination_device=_required(payload, 'destinationDevice', 'destination_device'),
            protocol=str(payload.get('protocol', '')),
            status=LinkStatus.parse(payload.get('status', 'normal')),
            anomaly_score=float(payload.get('anomalyScore', payload.get('anomaly_score', 0.0))),
        )
