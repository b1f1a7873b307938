"""Core aggregation, encoding and dispatch logic."""
