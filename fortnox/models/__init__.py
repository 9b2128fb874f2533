"""Data models for client state, results and errors.

Architecture:
    All models are Pydantic v2 and immutable (frozen=True). Credentials are
    replaced as a whole on refresh, never patched field by field.

Model Categories:
    - Auth: Credentials
    - Listing: MetaInformation, AggregatedResult
    - Errors: NormalizedError, SanitizedResponse
"""

from ..core.errors import NormalizedError, SanitizedResponse
from .credentials import Credentials
from .meta import AggregatedResult, MetaInformation

__all__ = [
    "AggregatedResult",
    "Credentials",
    "MetaInformation",
    "NormalizedError",
    "SanitizedResponse",
]
