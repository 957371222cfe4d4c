"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema   → application.yaml
    DatabaseSchema      → database.yaml
    LoggingSchema       → logging.yaml
    FeaturesSchema      → features.yaml
    ContentSchema       → content.yaml
    IntegrationsSchema  → integrations.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]
    allow_methods: list[str]
    allow_headers: list[str]
    max_age: int


class TimeoutsSchema(_StrictBase):
    external_api: float


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    health_message: str
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# =============================================================================
# database.yaml
# =============================================================================


class CollectionsSchema(_StrictBase):
    scientists: str
    messages: str


class DatabaseSchema(_StrictBase):
    default_name: str
    retry_delay_seconds: float
    server_selection_timeout_ms: int
    heartbeat_seconds: float
    collections: CollectionsSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    security_startup_checks_enabled: bool
    api_detailed_errors: bool
    api_request_logging: bool


# =============================================================================
# content.yaml
# =============================================================================


class ScientistsSchema(_StrictBase):
    palette: list[str] = Field(min_length=1)


class GuestbookSchema(_StrictBase):
    anonymous_author: str
    content_max_length: int
    author_max_length: int
    default_limit: int
    history_default_limit: int
    max_limit: int


class OptimizerSchema(_StrictBase):
    image_alt: str


class ImagePoolSchema(_StrictBase):
    source_url: str | None
    ttl_seconds: float
    retry_after_seconds: float = 60
    fallback_url: str
    seed: list[str]


class ContentSchema(_StrictBase):
    scientists: ScientistsSchema
    guestbook: GuestbookSchema
    optimizer: OptimizerSchema
    image_pool: ImagePoolSchema


# =============================================================================
# integrations.yaml
# =============================================================================


class ThumbnailSchema(_StrictBase):
    width: int
    height: int
    crop: str
    quality: int


class UploadLimitsSchema(_StrictBase):
    max_bytes: int
    allowed_extensions: list[str]


class ImageHostSchema(_StrictBase):
    api_base: str
    delivery_base: str
    folder: str
    thumbnail: ThumbnailSchema
    upload: UploadLimitsSchema


class CaptchaSchema(_StrictBase):
    turnstile_verify_url: str
    recaptcha_verify_url: str
    turnstile_max_token_length: int


class WordPressSchema(_StrictBase):
    wpcom_api_base: str


class IntegrationsSchema(_StrictBase):
    image_host: ImageHostSchema
    captcha: CaptchaSchema
    wordpress: WordPressSchema
