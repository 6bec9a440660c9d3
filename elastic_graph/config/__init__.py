"""Configuration module for the graph store."""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
