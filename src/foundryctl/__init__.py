"""Lifecycle management and endpoint discovery for Foundry Local."""

__version__ = "0.1.0"
