"""Factory for the configured authentication provider."""

from core.settings import settings
from .base import AuthProvider
from .standalone_provider import StandaloneAuthProvider


_provider_instance: AuthProvider | None = None


def get_auth_provider() -> AuthProvider:
    """Get the configured authentication provider.

    Returns:
        AuthProvider instance

    Raises:
        ValueError: If JWT_SECRET_KEY is not configured
    """
    global _provider_instance

    if _provider_instance is None:
        if not settings.JWT_SECRET_KEY:
            raise ValueError("JWT_SECRET_KEY must be set to issue or validate tokens")
        _provider_instance = StandaloneAuthProvider()

    return _provider_instance


def reset_auth_provider():
    """Reset the provider instance (useful for testing)."""
    global _provider_instance
    _provider_instance = None
