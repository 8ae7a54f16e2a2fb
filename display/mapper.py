"""
Spatial Layout Mapper

Converts device and communication records into a renderable graph view.

MAPPING BOUNDARY:
=================
This is the ONLY place where logical device positions become surface
coordinates. Renderers draw exactly what this module returns.

MAPPING RULES:
==============
1. Scale logical positions by (width / 800, height / 400)
2. Clamp both axes to [MARGIN, dimension - MARGIN]
3. Only the most recent HISTORY_LIMIT communications are drawn
4. Communications with an unresolvable endpoint are dropped, never an error
5. Unknown device categories fall back to neutral gray
6. A repeated device id keeps its first occurrence; later ones are dropped
"""

from __future__ import annotations
from typing import Dict, Final, List, Optional, Sequence, Set, Tuple
import hashlib
import logging

import numpy as np

from display.dtos import (
    Device, CommunicationRecord, DeviceCategory, LinkStatus,
    status_color, category_color,
)
from display.visualization.graph import (
    GraphNode, GraphEdge, NodeBadge, LegendEntry, NetworkGraphView,
)

logger = logging.getLogger(__name__)


# =============================================================================
# LAYOUT CONSTANTS
# =============================================================================

REFERENCE_WIDTH: Final[float] = 800.0
REFERENCE_HEIGHT: Final[float] = 400.0
MARGIN: Final[float] = 30.0
HISTORY_LIMIT: Final[int] = 20

NODE_RADIUS: Final[float] = 20.0
NODE_STROKE_WIDTH: Final[float] = 2.0
SELECTED_STROKE_WIDTH: Final[float] = 4.0
EDGE_STROKE_WIDTH: Final[float] = 2.0
EDGE_OPACITY: Final[float] = 0.6

LEGEND: Final[Tuple[LegendEntry, ...]] = tuple(
    LegendEntry(label=status.display_label, color=status_color(status))
    for status in (LinkStatus.NORMAL, LinkStatus.SUSPICIOUS, LinkStatus.ANOMALY)
)


class SpatialLayoutMapper:
    """
    Maps devices and communications to a NetworkGraphView.

    Recomputed in full on every call. Identical inputs produce an
    identical view, so redrawing under unchanged inputs is safe.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT, margin: float = MARGIN):
        self._history_limit = history_limit
        self._margin = margin
        self._warned_categories: Set[str] = set()
        self.dropped_communications = 0

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def layout(
        self,
        devices: Sequence[Device],
        communications: Sequence[CommunicationRecord],
        width: float,
        height: float,
        selected_device: Optional[str] = None,
    ) -> NetworkGraphView:
        """Lay out one frame for a surface of ``width`` x ``height``."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface dimensions must be positive, got {width}x{height}")

        devices = self._unique(devices)
        if not devices:
            return self._build_view(width, height, (), (), selected_device)

        coordinates = self.surface_coordinates(devices, width, height)
        lookup: Dict[str, Tuple[Device, Tuple[float, float]]] = {
            device.device_id: (device, coordinates[i])
            for i, device in enumerate(devices)
        }

        edges = self._map_edges(communications, lookup)
        nodes = tuple(
            self._map_node(device, coordinates[i], selected_device)
            for i, device in enumerate(devices)
        )

        return self._build_view(width, height, nodes, edges, selected_device)

    def surface_coordinates(
        self,
        devices: Sequence[Device],
        width: float,
        height: float,
    ) -> List[Tuple[float, float]]:
        """Scale and clamp every device position into the surface."""
        raw = np.array([device.position for device in devices], dtype=float).reshape(-1, 2)
        raw = np.nan_to_num(raw, nan=0.0)

        scale = np.array([width / REFERENCE_WIDTH, height / REFERENCE_HEIGHT])
        with np.errstate(over='ignore', invalid='ignore'):
            scaled = raw * scale
        scaled = np.nan_to_num(scaled, nan=0.0)

        result = np.empty_like(scaled)
        for axis, dimension in enumerate((width, height)):
            lower = self._margin
            upper = dimension - self._margin
            if upper < lower:
                # Surface too small for the inset: centre on this axis
                result[:, axis] = dimension / 2.0
            else:
                result[:, axis] = np.clip(scaled[:, axis], lower, upper)

        return [(float(x), float(y)) for x, y in result]

    @staticmethod
    def _unique(devices: Sequence[Device]) -> List[Device]:
        seen: Set[str] = set()
        unique = []
        for device in devices:
            if device.device_id in seen:
                logger.warning(
                    "Duplicate device id %r; keeping its first occurrence", device.device_id
                )
                continue
            seen.add(device.device_id)
            unique.append(device)
        return unique

    # =========================================================================
    # EDGE MAPPING
    # =========================================================================

    def _map_edges(
        self,
        communications: Sequence[CommunicationRecord],
        lookup: Dict[str, Tuple[Device, Tuple[float, float]]],
    ) -> Tuple[GraphEdge, ...]:
        recent = list(communications)[-self._history_limit:] if self._history_limit > 0 else []

        edges = []
        for index, record in enumerate(recent):
            source = lookup.get(record.source_device)
            target = lookup.get(record.destination_device)
            if source is None or target is None:
                self.dropped_communications += 1
                logger.debug(
                    "Dropping communication %s -> %s: unknown endpoint",
                    record.source_device, record.destination_device,
                )
                continue

            (x1, y1), (x2, y2) = source[1], target[1]
            color = status_color(record.status)
            edges.append(GraphEdge(
                edge_id=f"{index}:{record.source_device}->{record.destination_device}",
                source_id=record.source_device,
                target_id=record.destination_device,
                x1=x1,
                y1=y1,
                x2=x2,
                y2=y2,
                color=color,
                thickness=EDGE_STROKE_WIDTH,
                opacity=EDGE_OPACITY,
                style="dashed" if record.status is LinkStatus.ANOMALY else "solid",
                label=record.protocol or None,
                label_position=((x1 + x2) / 2.0, (y1 + y2) / 2.0),
                status=record.status,
                anomaly_score=record.anomaly_score,
            ))

        return tuple(edges)

    # =========================================================================
    # NODE MAPPING
    # =========================================================================

    def _map_node(
        self,
        device: Device,
        coordinate: Tuple[float, float],
        selected_device: Optional[str],
    ) -> GraphNode:
        category = device.category
        if category is DeviceCategory.UNKNOWN and device.device_type not in self._warned_categories:
            self._warned_categories.add(device.device_type)
            logger.warning(
                "Unknown device category %r for %s; using default style",
                device.device_type, device.device_id,
            )

        is_selected = selected_device == device.device_id
        badge = NodeBadge(count=device.active_connections) if device.active_connections > 0 else None

        return GraphNode(
            node_id=device.device_id,
            x=coordinate[0],
            y=coordinate[1],
            radius=NODE_RADIUS,
            color=category_color(category),
            stroke_color=status_color(device.status),
            stroke_width=SELECTED_STROKE_WIDTH if is_selected else NODE_STROKE_WIDTH,
            glyph=device.device_type[:1],
            label=device.device_id,
            entity_type=device.device_type,
            status=device.status,
            is_selected=is_selected,
            is_pulsing=device.status is LinkStatus.ANOMALY,
            badge=badge,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _build_view(
        self,
        width: float,
        height: float,
        nodes: Tuple[GraphNode, ...],
        edges: Tuple[GraphEdge, ...],
        selected_device: Optional[str],
    ) -> NetworkGraphView:
        view_id = hashlib.sha256(
            repr((width, height, nodes, edges, selected_device)).encode()
        ).hexdigest()[:16]

        return NetworkGraphView(
            view_id=view_id,
            width=float(width),
            height=float(height),
            nodes=nodes,
            edges=edges,
            legend=LEGEND if nodes else (),
            selected_device=selected_device,
        )
