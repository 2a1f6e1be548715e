"""Layered sample backend: domain core, persistence adapters and an HTTP host."""

__version__ = "1.0.0"
