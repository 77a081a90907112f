"""Application layer: configuration, wiring and command line."""
