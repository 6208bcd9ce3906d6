"""Routing tools."""

from .api import register_routing_tools

__all__ = ["register_routing_tools"]
