"""
Pipeline Tests Package

Tests for the bridge: position cache, classifier, projector, event hub,
orchestration and API.

TEST AXIOMS:
=============
1. Determinism: same snapshot + same clock = identical visual snapshot
2. Stability: a cached coordinate never changes
3. Filtering: dangling references are dropped, never raised
"""
