"""Geocoding tools."""

from .api import register_geocoding_tools

__all__ = ["register_geocoding_tools"]
