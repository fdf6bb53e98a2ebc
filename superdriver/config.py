"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ConsumerConfig:
    """Configuration of a profile consumer."""

    provider_url: str = ""
    profile_id: str = ""
    mapping_url: Optional[str] = None
    timeout: int = 30
    cache_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ConsumerConfig":
        """Load config from environment variables."""
        return cls(
            provider_url=os.getenv("SUPERDRIVER_PROVIDER_URL", ""),
            profile_id=os.getenv("SUPERDRIVER_PROFILE_ID", ""),
            mapping_url=os.getenv("SUPERDRIVER_MAPPING_URL") or None,
            timeout=int(os.getenv("SUPERDRIVER_TIMEOUT", "30")),
            cache_dir=os.getenv("SUPERDRIVER_CACHE_DIR") or None,
        )


@dataclass
class RegistryConfig:
    """Configuration of the service register."""

    url: str = "http://localhost:8282"
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Load config from environment variables."""
        return cls(
            url=os.getenv("SUPERDRIVER_REGISTRY_URL", "http://localhost:8282"),
            timeout=int(os.getenv("SUPERDRIVER_TIMEOUT", "30")),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    consumer: ConsumerConfig = None
    registry: RegistryConfig = None

    def __post_init__(self):
        """Initialize defaults."""
        if self.consumer is None:
            self.consumer = ConsumerConfig.from_env()
        if self.registry is None:
            self.registry = RegistryConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            consumer=ConsumerConfig.from_env(),
            registry=RegistryConfig.from_env(),
        )
