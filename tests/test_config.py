"""
Tests for configuration
"""

from sentry_mcp.models.config import AppConfig, SentryConfig


class TestSentryConfig:
    def test_from_env_defaults(self, monkeypatch):
        """Test defaults when only the token is set"""
        monkeypatch.setenv("SENTRY_AUTH", "token")
        monkeypatch.delenv("SENTRY_HOST", raising=False)
        monkeypatch.delenv("PROTOCOL", raising=False)
        monkeypatch.delenv("SENTRY_TIMEOUT", raising=False)

        config = SentryConfig.from_env()

        assert config.host == "https://sentry.io"
        assert config.auth_token == "token"
        assert config.timeout == 30.0
        assert config.api_url == "https://sentry.io/api/0"
        assert config.is_configured()

    def test_from_env_custom_host(self, monkeypatch):
        """Test host and protocol from the environment"""
        monkeypatch.setenv("SENTRY_AUTH", "token")
        monkeypatch.setenv("SENTRY_HOST", "sentry.internal:9000/")
        monkeypatch.setenv("PROTOCOL", "http")

        config = SentryConfig.from_env()

        assert config.host == "http://sentry.internal:9000"

    def test_normalize_host_keeps_scheme(self):
        """Test hosts that carry a scheme are kept"""
        assert SentryConfig.normalize_host("https://sentry.example.com", "http") == (
            "https://sentry.example.com"
        )

    def test_not_configured(self):
        """Test an empty config is not configured"""
        assert not SentryConfig().is_configured()


class TestAppConfig:
    def test_from_env(self, monkeypatch):
        """Test debug flag and server name"""
        monkeypatch.setenv("SENTRY_AUTH", "token")
        monkeypatch.setenv("DEBUG", "True")
        monkeypatch.delenv("MCP_SERVER_NAME", raising=False)

        config = AppConfig.from_env()

        assert config.debug is True
        assert config.server_name == "Sentry"
        assert config.sentry.auth_token == "token"
