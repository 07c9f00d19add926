"""API integration layer."""

from .arr import RadarrClient, SonarrClient
from .client import APIError, ServiceClient, resolve_url
from .tautulli import TautulliClient

__all__ = [
    "APIError",
    "RadarrClient",
    "ServiceClient",
    "SonarrClient",
    "TautulliClient",
    "resolve_url",
]
