"""Credential store for security schemes."""
import os
from typing import Any, Dict, Optional


class CredentialStore:
    """
    Credentials keyed by security scheme id

    Usage:
    ```python
    credentials = CredentialStore()
    credentials.set_basic("user", "secret")
    credentials.get("basic", "user")  # "user"
    ```
    """

    BASIC = "basic"
    APIKEY = "apikey"

    def __init__(self, schemes: Optional[Dict[str, Dict[str, Any]]] = None):
        self._schemes: Dict[str, Dict[str, Any]] = {
            scheme_id: dict(fields) for scheme_id, fields in (schemes or {}).items()
        }

    def set_basic(self, user: str, password: str) -> None:
        """Set HTTP basic credentials"""
        self._schemes[self.BASIC] = {"user": user, "password": password}

    def set_apikey(self, key: str, secret: Optional[str] = None) -> None:
        """Set API key credentials"""
        self._schemes[self.APIKEY] = {"key": key, "secret": secret}

    def has_scheme(self, scheme_id: str) -> bool:
        return scheme_id in self._schemes

    def get(self, scheme_id: str, field: str) -> Optional[Any]:
        """Return a credential field, or None if the scheme or field is missing"""
        return self._schemes.get(scheme_id, {}).get(field)

    @classmethod
    def from_env(cls) -> "CredentialStore":
        """Load credentials from environment variables"""
        store = cls()

        user = os.getenv("SUPERDRIVER_BASIC_USER")
        if user:
            store.set_basic(user, os.getenv("SUPERDRIVER_BASIC_PASSWORD", ""))

        key = os.getenv("SUPERDRIVER_APIKEY_KEY")
        if key:
            store.set_apikey(key, os.getenv("SUPERDRIVER_APIKEY_SECRET"))

        return store

    def __repr__(self) -> str:
        # Never print secrets
        return f"CredentialStore(schemes={sorted(self._schemes)})"
