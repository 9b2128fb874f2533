"""Authentication providers and OAuth token lifecycle."""

from .base import AuthProvider, LegacyTokenAuth, StaticTokenAuth
from .token_manager import TokenManager

__all__ = ["AuthProvider", "LegacyTokenAuth", "StaticTokenAuth", "TokenManager"]
