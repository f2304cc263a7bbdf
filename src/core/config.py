"""
Preset Resolution Service - Application Configuration

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Environment variable prefix PRS_ for Preset Resolution Service
- Host rules parsed from JSON in the environment, e.g.
  PRS_HOST_RULES='[{"host_type": "github", "match_host": "api.github.com", "token": "..."}]'
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HostRule(BaseModel):
    """Credential rule for a hosting platform.

    A rule matches when its host_type (if set) equals the platform and its
    match_host (if set) equals or is a parent domain of the request host.
    """

    host_type: str | None = None
    match_host: str | None = None
    token: str | None = None


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables with PRS_ prefix.
    Example: PRS_GITLAB_ENDPOINT=https://gitlab.example.org/api/v4/
    """

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8090

    # Application metadata
    service_name: str = "preset-resolution-service"
    version: str = "0.1.0"
    environment: str = "development"

    # Logging configuration
    log_level: str = "INFO"
    log_json: bool = True

    # Tracing configuration
    tracing_enabled: bool = True
    tracing_console_export: bool = False

    # HTTP transport
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    http_max_retries: int = Field(default=2, ge=1, le=10)
    http_retry_delay_seconds: float = Field(default=1.0, ge=0)

    # Cross-run cache for fetched preset files
    cache_ttl_seconds: float = Field(default=900.0, ge=0)

    # Provider endpoints
    default_platform: str = "github"
    github_endpoint: str = "https://api.github.com/"
    gitlab_endpoint: str = "https://gitlab.com/api/v4/"
    gitea_endpoint: str = "https://gitea.com/api/v1/"

    # Implicit default preset also tries custom.json first
    app_mode: bool = False

    host_rules: list[HostRule] = Field(default_factory=list)

    model_config = SettingsConfigDict(
        env_prefix="PRS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def endpoint_for(self, platform: str) -> str | None:
        """Return the configured default endpoint for a platform key."""
        return {
            "github": self.github_endpoint,
            "gitlab": self.gitlab_endpoint,
            "gitea": self.gitea_endpoint,
        }.get(platform)


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings instance with values from environment
    """
    return Settings()
