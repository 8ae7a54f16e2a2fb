"""
Neuromorphic Visualization Bridge

This package turns the anomaly-detection engine's internal state into
visual snapshots and fans them out to renderers.

COMPONENT STRUCTURE:
====================

1. CONTRACTS (contracts/)
   - Simulation snapshots, discrete events, the detector protocol
   - MUST NOT: Import from any component below

2. POSITION CACHE (core/positions.py)
   - Stable 3-D coordinate per entity id, seeded deterministic jitter
   - MUST NOT: Evict or recompute a stored coordinate

3. STATE CLASSIFIER (core/classifier.py)
   - Continuous state -> {inactive, active, refractory}, activity, highlight
   - MUST NOT: Read configuration; thresholds are fixed

4. STATE PROJECTOR (core/projector.py)
   - SimulationSnapshot -> VisualSnapshot
   - MUST NOT: Mutate a snapshot after building it

5. EVENT HUB (hub.py)
   - Four-channel synchronous fan-out with late-joiner replay on VISUAL_STATE
   - MUST NOT: Be a module-level singleton

6. BRIDGE (engine.py)
   - Wires the detector to the projector and the hub
   - Exposes the renderer-facing subscribe/query surface

7. OBSERVABILITY (observability/)
   - Metrics and error records; never changes behavior

8. API (api/)
   - Read-only HTTP view of the bridge

ERROR CATEGORIES:
=================
- Dangling references: filtered, counted, never raised
- Unknown layer tag: LayerConfigurationError (fatal)
- Detector start failure: surfaced as False
- Unknown device category: default style plus a warning
"""

from .engine import VisualizationBridge, BridgeConfig
from .hub import EventHub, Channel, Subscription

__all__ = ['VisualizationBridge', 'BridgeConfig', 'EventHub', 'Channel', 'Subscription']
