"""Read-only HTTP surface of the bridge."""
