"""Core map service, upstream HTTP client and providers."""

from .client import ApiClient
from .maps import MapService
from .providers import MapProvider, create_provider

__all__ = ["ApiClient", "MapProvider", "MapService", "create_provider"]
