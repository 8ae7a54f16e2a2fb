"""
Graph Visualization Contracts

Responsibility:
Deterministic transformation of device/communication records into
renderable graph views. Coordinates are already in surface pixels.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from display.dtos import DTOVersion, LinkStatus


@dataclass(frozen=True)
class NodeBadge:
    """Numeric badge drawn at a node's upper-right corner."""
    count: int
    offset: Tuple[float, float] = (15.0, -15.0)
    radius: float = 8.0
    color: str = "#EF4444"


@dataclass(frozen=True)
class GraphNode:
    """Renderable device node."""
    node_id: str
    x: float
    y: float
    radius: float
    color: str            # fill, keyed by device category
    stroke_color: str     # keyed by device status
    stroke_width: float
    glyph: str            # first letter of the category label
    label: str
    entity_type: str
    status: LinkStatus
    is_selected: bool
    is_pulsing: bool
    badge: Optional[NodeBadge] = None


@dataclass(frozen=True)
class GraphEdge:
    """Renderable communication edge."""
    edge_id: str
    source_id: str
    target_id: str
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    thickness: float
    opacity: float
    style: str  # solid, dashed
    label: Optional[str]
    label_position: Tuple[float, float]
    status: LinkStatus
    anomaly_score: float

    @property
    def is_dashed(self) -> bool:
        return self.style == "dashed"


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Pre-layouted network graph.

    DETERMINISTIC:
    Same devices + same communications + same surface = identical view.
    """
    view_id: str
    width: float
    height: float
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    legend: Tuple[LegendEntry, ...]
    selected_device: Optional[str] = None
    dto_version: DTOVersion = field(default=DTOVersion.V1)

    def __post_init__(self):
        if self.dto_version != DTOVersion.current():
            raise ValueError(f"Unknown DTO version: {self.dto_version}")

    def node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'view_id': self.view_id,
            'width': self.width,
            'height': self.height,
            'selected_device': self.selected_device,
            'nodes': [
                {
                    'id': n.node_id,
                    'x': n.x,
                    'y': n.y,
                    'radius': n.radius,
                    'fill': n.color,
                    'stroke': n.stroke_color,
                    'stroke_width': n.stroke_width,
                    'glyph': n.glyph,
                    'label': n.label,
                    'type': n.entity_type,
                    'status': n.status.value,
                    'selected': n.is_selected,
                    'pulsing': n.is_pulsing,
                    'badge': n.badge.count if n.badge else None,
                }
                for n in self.nodes
            ],
            'edges': [
                {
                    'id': e.edge_id,
                    'source': e.source_id,
                    'target': e.target_id,
                    'x1': e.x1,
                    'y1': e.y1,
                    'x2': e.x2,
                    'y2': e.y2,
                    'stroke': e.color,
                    'stroke_width': e.thickness,
                    'opacity': e.opacity,
                    'dashed': e.is_dashed,
                    'label': e.label,
                    'label_position': list(e.label_position),
                    'status': e.status.value,
                    'anomaly_score': e.anomaly_score,
                }
                for e in self.edges
            ],
            'legend': [{'label': l.label, 'color': l.color} for l in self.legend],
        }
