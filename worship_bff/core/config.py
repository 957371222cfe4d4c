"""
Configuration Management.

Loads secrets from config/.env (or the process environment) and settings
from config/settings/*.yaml.

Secrets and deployment overrides (.env / environment):
    PORT, APP_ENV, WP_URL, MONGODB_URI, CORS_ORIGINS,
    TURNSTILE_SECRET_KEY, RECAPTCHA_SECRET_KEY,
    CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET

Settings (YAML):
    application.yaml   - App identity, server, cors, timeouts
    database.yaml      - Document store retry and heartbeat settings
    logging.yaml       - Logging configuration
    features.yaml      - Feature flags
    content.yaml       - Palette, guestbook limits, optimizer, image pool
    integrations.yaml  - Image host, CAPTCHA and WordPress endpoints
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from worship_bff.core.config_schema import (
    ApplicationSchema,
    ContentSchema,
    DatabaseSchema,
    FeaturesSchema,
    IntegrationsSchema,
    LoggingSchema,
)

# Published test secrets of both providers; they accept every token.
TURNSTILE_TEST_SECRET = "1x0000000000000000000000000000000AA"
RECAPTCHA_TEST_SECRET = "6LeIxAcTAAAAAGG-vFI1TnRWxMZNFuojJ4WifJWe"


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets and deployment overrides loaded from config/.env and the environment."""

    port: int | None = None
    app_env: str | None = None
    wp_url: str = "http://wordpress:80"
    mongodb_uri: str = "mongodb://mongodb:27017/center-believer"
    cors_origins: str = ""

    turnstile_secret_key: str = TURNSTILE_TEST_SECRET
    recaptcha_secret_key: str = RECAPTCHA_TEST_SECRET

    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """CORS_ORIGINS split on commas, blanks dropped."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._features = _load_validated(FeaturesSchema, "features.yaml")
        self._content = _load_validated(ContentSchema, "content.yaml")
        self._integrations = _load_validated(IntegrationsSchema, "integrations.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Document store settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        """Feature flags."""
        return self._features

    @property
    def content(self) -> ContentSchema:
        """Palette, guestbook, optimizer and image pool settings."""
        return self._content

    @property
    def integrations(self) -> IntegrationsSchema:
        """Third-party endpoint settings."""
        return self._integrations


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_environment() -> str:
    """Effective environment name: APP_ENV wins over application.yaml."""
    return get_settings().app_env or get_app_config().application.environment


def is_production() -> bool:
    return get_environment() == "production"


def get_cors_origins() -> list[str]:
    """
    Effective CORS allow-list.

    CORS_ORIGINS (comma separated) replaces the application.yaml list
    when set.
    """
    override = get_settings().cors_origin_list
    if override:
        return override
    return list(get_app_config().application.cors.origins)


def get_server_address() -> tuple[str, int]:
    """
    Get the host and port the server should bind.

    Returns:
        Tuple of (host, port). PORT overrides application.yaml.
    """
    server = get_app_config().application.server
    return server.host, get_settings().port or server.port
