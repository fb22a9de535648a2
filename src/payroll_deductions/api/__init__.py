"""HTTP API for the deduction engine."""
