"""
Core DTO Types

Foundational enums, version types and palettes for all display DTOs.

VERSIONING REQUIREMENT:
=======================
Every top-level view includes a version field.
Renderers MUST fail fast on unknown versions.

PALETTES:
=========
Colour lookups are total functions over the enums below. Each enum that can
receive labels from outside has exactly one explicit fallback member, so an
unknown label is a reachable branch instead of a missing dict key.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, Final


# =============================================================================
# VERSION CONSTANTS
# =============================================================================

class DTOVersion(Enum):
    """
    DTO schema versions.

    Renderers MUST reject unknown versions.
    """
    V1 = "v1"

    @classmethod
    def current(cls) -> 'DTOVersion':
        return cls.V1


CURRENT_DTO_VERSION: Final[DTOVersion] = DTOVersion.V1


# =============================================================================
# NEURON ACTIVATION STATES
# =============================================================================

class ActivationState(Enum):
    """Discrete visual category of a neuron."""
    INACTIVE = "inactive"
    ACTIVE = "active"
    REFRACTORY = "refractory"


# =============================================================================
# LINK / DEVICE STATUS
# =============================================================================

class LinkStatus(Enum):
    """
    Status of a device or of a communication record.

    Closed set: the capture collaborator never emits anything else.
    """
    NORMAL = "normal"
    SUSPICIOUS = "suspicious"
    ANOMALY = "anomaly"

    @classmethod
    def parse(cls, value: str) -> 'LinkStatus':
        """Parse a status label, raising ValueError on anything unknown."""
        if isinstance(value, LinkStatus):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown status label: {value!r}") from None

    @property
    def display_label(self) -> str:
        return self.value.capitalize()


_STATUS_COLORS: Dict[LinkStatus, str] = {
    LinkStatus.NORMAL: "#22C55E",
    LinkStatus.SUSPICIOUS: "#F59E0B",
    LinkStatus.ANOMALY: "#EF4444",
}


def status_color(status: LinkStatus) -> str:
    """Stroke colour for a status (total over LinkStatus)."""
    return _STATUS_COLORS[status]


# =============================================================================
# DEVICE CATEGORIES
# =============================================================================

class DeviceCategory(Enum):
    """
    Device categories known to the dashboard.

    UNKNOWN is the single fallback for labels outside the table.
    """
    SERVER = "Server"
    WORKSTATION = "Workstation"
    ROUTER = "Router"
    IOT_DEVICE = "IoT Device"
    MOBILE = "Mobile"
    PRINTER = "Printer"
    DATABASE = "Database"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, label: str) -> 'DeviceCategory':
        """Map a raw category label to a member, UNKNOWN if unrecognised."""
        if isinstance(label, DeviceCategory):
            return label
        for member in cls:
            if member is not cls.UNKNOWN and member.value == label:
                return member
        return cls.UNKNOWN


NEUTRAL_GRAY: Final[str] = "#6B7280"

_CATEGORY_COLORS: Dict[DeviceCategory, str] = {
    DeviceCategory.SERVER: "#3B82F6",
    DeviceCategory.WORKSTATION: "#10B981",
    DeviceCategory.ROUTER: "#F59E0B",
    DeviceCategory.IOT_DEVICE: "#8B5CF6",
    DeviceCategory.MOBILE: "#EF4444",
    DeviceCategory.PRINTER: NEUTRAL_GRAY,
    DeviceCategory.DATABASE: "#EC4899",
}


def category_color(category: DeviceCategory) -> str:
    """Fill colour for a device category, neutral gray for UNKNOWN."""
    if category is DeviceCategory.UNKNOWN:
        return NEUTRAL_GRAY
    return _CATEGORY_COLORS[category]
