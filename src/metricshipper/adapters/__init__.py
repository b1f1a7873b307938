"""Adapters for transports and web frameworks."""
