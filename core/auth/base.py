"""Abstract base class for authentication providers."""

from abc import ABC, abstractmethod
from typing import Dict, Any


class AuthProvider(ABC):
    """Interface between the API and whatever issues its bearer tokens."""

    @abstractmethod
    def validate_token(self, token: str) -> Dict[str, Any]:
        """Validate JWT token and return decoded claims.

        Args:
            token: JWT token string

        Returns:
            Dict containing token claims (must include 'sub' for the account ID)

        Raises:
            HTTPException: If token is invalid or expired
        """
        pass

    @abstractmethod
    def create_access_token(self, account_id: str, email: str) -> str:
        """Issue an access token for an account."""
        pass

    @abstractmethod
    def hash_password(self, password: str) -> str:
        pass

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        pass
