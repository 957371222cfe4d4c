"""
Startup Validation.

Checks deployment invariants before the application accepts traffic.
If any check fails, the application refuses to start with a clear error
message.

Called during FastAPI lifespan initialization when
features.security_startup_checks_enabled is true.
"""

from worship_bff.core.config import (
    RECAPTCHA_TEST_SECRET,
    TURNSTILE_TEST_SECRET,
    get_app_config,
    get_cors_origins,
    get_environment,
    get_settings,
)
from worship_bff.core.logging import get_logger

logger = get_logger(__name__)


class StartupCheckError(RuntimeError):
    """Raised when a startup check fails."""


def run_startup_checks() -> None:
    """
    Validate all deployment invariants at startup.

    Raises:
        StartupCheckError: If any check fails
    """
    app_config = get_app_config()
    settings = get_settings()
    environment = get_environment()
    is_production = environment == "production"

    errors: list[str] = []

    _check_database_uri(settings, errors)
    _check_production_safety(app_config, is_production, errors)
    _check_production_secrets(settings, is_production, errors)

    if errors:
        for error in errors:
            logger.error("Startup check failed", extra={"check": error})
        raise StartupCheckError(
            f"Startup blocked: {len(errors)} check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info(
        "Startup checks passed",
        extra={"environment": environment, "checks_run": 3},
    )


def _check_database_uri(settings, errors: list[str]) -> None:
    """The document store URI must use a MongoDB scheme."""
    if not settings.mongodb_uri.startswith(("mongodb://", "mongodb+srv://")):
        errors.append("MONGODB_URI must start with mongodb:// or mongodb+srv://")


def _check_production_safety(app_config, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    if app_config.application.debug:
        errors.append("debug is true in production environment")

    if app_config.features.api_detailed_errors:
        errors.append("api_detailed_errors is true in production environment")

    origins = get_cors_origins()
    if not origins:
        errors.append("CORS allow-list is empty in production environment")
    if "*" in origins:
        errors.append("CORS allow-list contains '*' in production environment")


def _check_production_secrets(settings, is_production: bool, errors: list[str]) -> None:
    """Production must not run on CAPTCHA test keys or without image host credentials."""
    if not is_production:
        return

    if settings.turnstile_secret_key == TURNSTILE_TEST_SECRET:
        errors.append("TURNSTILE_SECRET_KEY is the public test key")
    if settings.recaptcha_secret_key == RECAPTCHA_TEST_SECRET:
        errors.append("RECAPTCHA_SECRET_KEY is the public test key")

    missing = [
        name
        for name, value in (
            ("CLOUDINARY_CLOUD_NAME", settings.cloudinary_cloud_name),
            ("CLOUDINARY_API_KEY", settings.cloudinary_api_key),
            ("CLOUDINARY_API_SECRET", settings.cloudinary_api_secret),
        )
        if not value
    ]
    if missing:
        errors.append(f"Image host credentials missing: {', '.join(missing)}")
