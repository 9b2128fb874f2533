"""Fortnox REST connector."""

from .client import FortnoxClient
from .endpoints import get_endpoint_spec, list_endpoint_ids

__all__ = ["FortnoxClient", "get_endpoint_spec", "list_endpoint_ids"]
