"""
API client modules for the Selerity Context API.

This package provides the client used for:
- entity search (DDS)
- recommendation queries
- entitled sources
"""

from .context_client import ContextApiClient, ContextApiError

__all__ = [
    'ContextApiClient',
    'ContextApiError',
]
