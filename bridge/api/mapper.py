"""
API Mapper
==========

Transforms visual snapshots into JSON-ready dicts for the HTTP surface.
Field names follow the renderer's camelCase contract.
"""
from typing import Any, Dict

from display.dtos import VisualSnapshot


def map_snapshot_to_dto(snapshot: VisualSnapshot) -> Dict[str, Any]:
    """Map a VisualSnapshot to its wire form."""
    return {
        "dtoVersion": snapshot.dto_version.value,
        "generatedAt": snapshot.generated_at,
        "neurons": [
            {
                "id": n.neuron_id,
                "x": n.x,
                "y": n.y,
                "z": n.z,
                "layer": n.layer,
                "size": n.size,
                "connections": list(n.connections),
                "state": n.state.value,
                "activationLevel": n.activation_level,
                "anomalyLevel": n.anomaly_level,
            }
            for n in snapshot.neurons
        ],
        "connections": [
            {
                "id": c.connection_id,
                "sourceId": c.source_id,
                "targetId": c.target_id,
                "strength": c.strength,
                "active": c.active,
                "highlighted": c.highlighted,
            }
            for c in snapshot.connections
        ],
        "anomalyScore": snapshot.anomaly_score,
        "isAnalysisActive": snapshot.is_analysis_active,
        "activeThreats": snapshot.active_threats,
    }
