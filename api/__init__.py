"""HTTP adapter over the chess rules engine."""
