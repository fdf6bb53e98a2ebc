"""Tests for configuration and credential loading."""
import pytest

from superdriver.config import AppConfig, ConsumerConfig, RegistryConfig
from superdriver.security.credentials import CredentialStore


class TestCredentialStore:
    """Test credential store."""

    def test_get_missing_scheme(self):
        """Test missing schemes and fields read as None."""
        store = CredentialStore({"basic": {"user": "alice"}})
        assert store.get("basic", "user") == "alice"
        assert store.get("basic", "password") is None
        assert store.get("apikey", "key") is None
        assert store.has_scheme("basic") is True
        assert store.has_scheme("apikey") is False

    def test_from_env(self, monkeypatch):
        """Test loading credentials from environment."""
        monkeypatch.setenv("SUPERDRIVER_BASIC_USER", "alice")
        monkeypatch.setenv("SUPERDRIVER_BASIC_PASSWORD", "s3cret")
        monkeypatch.setenv("SUPERDRIVER_APIKEY_KEY", "KEY")
        monkeypatch.delenv("SUPERDRIVER_APIKEY_SECRET", raising=False)

        store = CredentialStore.from_env()

        assert store.get("basic", "password") == "s3cret"
        assert store.get("apikey", "key") == "KEY"
        assert store.get("apikey", "secret") is None

    def test_repr_hides_secrets(self):
        """Test repr never shows credential values."""
        store = CredentialStore()
        store.set_basic("alice", "s3cret")
        assert "s3cret" not in repr(store)


class TestConfig:
    """Test configuration loading."""

    def test_consumer_from_env(self, monkeypatch):
        """Test consumer config from environment."""
        monkeypatch.setenv("SUPERDRIVER_PROVIDER_URL", "https://weather.example.com")
        monkeypatch.setenv("SUPERDRIVER_PROFILE_ID", "http://supermodel.io/weather/profile/WeatherAlerts")
        monkeypatch.setenv("SUPERDRIVER_TIMEOUT", "5")
        monkeypatch.delenv("SUPERDRIVER_MAPPING_URL", raising=False)

        config = ConsumerConfig.from_env()

        assert config.provider_url == "https://weather.example.com"
        assert config.timeout == 5
        assert config.mapping_url is None

    def test_app_config_defaults(self, monkeypatch):
        """Test nested configs are created from environment."""
        monkeypatch.setenv("SUPERDRIVER_REGISTRY_URL", "http://registry.example.com")

        config = AppConfig()

        assert isinstance(config.consumer, ConsumerConfig)
        assert isinstance(config.registry, RegistryConfig)
        assert config.registry.url == "http://registry.example.com"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
