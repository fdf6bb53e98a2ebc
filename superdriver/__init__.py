"""superdriver - profile-driven API consumer."""

__version__ = "0.1.0"

from superdriver.api.consumer import Consumer
from superdriver.api.register import Register
from superdriver.config import ConsumerConfig, RegistryConfig
from superdriver.security.credentials import CredentialStore

__all__ = [
    "Consumer",
    "Register",
    "ConsumerConfig",
    "RegistryConfig",
    "CredentialStore",
]
