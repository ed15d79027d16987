import os

from pydantic import BaseModel


class SentryConfig(BaseModel):
    host: str = "https://sentry.io"
    auth_token: str = ""
    timeout: float = 30.0

    @classmethod
    def from_env(cls):
        protocol = os.getenv("PROTOCOL", "https")
        host = os.getenv("SENTRY_HOST", "sentry.io")

        return cls(
            host=cls.normalize_host(host, protocol),
            auth_token=os.getenv("SENTRY_AUTH", ""),
            timeout=float(os.getenv("SENTRY_TIMEOUT", "30")),
        )

    @staticmethod
    def normalize_host(host: str, protocol: str = "https") -> str:
        host = host.strip().rstrip("/")
        if host and not host.startswith(("http://", "https://")):
            host = f"{protocol}://{host}"
        return host

    @property
    def api_url(self) -> str:
        return f"{self.host}/api/0"

    def is_configured(self) -> bool:
        return bool(self.host and self.auth_token)


class AppConfig(BaseModel):
    sentry: SentryConfig
    server_name: str = "Sentry"
    debug: bool = False

    @classmethod
    def from_env(cls):
        return cls(
            sentry=SentryConfig.from_env(),
            server_name=os.getenv("MCP_SERVER_NAME", "Sentry"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )
