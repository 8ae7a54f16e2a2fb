"""Demo drivers and the simulated detector."""
