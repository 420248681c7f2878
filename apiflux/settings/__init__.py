"""Application settings loading."""

from .app import ApiFluxSettings, get_settings


__all__ = ["ApiFluxSettings", "get_settings"]
