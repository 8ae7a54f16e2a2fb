"""
Display Layer

Renderable, immutable primitives for the network-security dashboard.

CONTENTS:
=========
1. dtos/           - Visual neurons, connections, snapshots, device records
2. visualization/  - Pre-layouted graph views (nodes, edges, badges, legend)
3. mapper.py       - SpatialLayoutMapper: device records -> graph view
4. interaction/    - Selection toggle

CONSTRAINTS:
============
- Everything here is frozen once constructed
- Layout is deterministic: same input, same view
- Never imports from the bridge layer
"""
