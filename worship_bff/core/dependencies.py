"""
FastAPI Dependencies.

Shared dependencies for request handling. Every third-party client and
repository reaches the endpoints through these functions, so tests swap
them with app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends

from worship_bff.core.config import get_app_config, get_settings
from worship_bff.core.database import get_document_store
from worship_bff.core.logging import get_logger
from worship_bff.integrations.captcha import BotVerifier, ChallengeVerifier
from worship_bff.integrations.http import get_http_client
from worship_bff.integrations.image_host import CloudinaryImageHost, ImageHost, ImageTransform
from worship_bff.integrations.image_pool import ImagePool, get_image_pool
from worship_bff.integrations.wordpress import WordPressClient
from worship_bff.repositories.message import MessageRepository
from worship_bff.repositories.scientist import ScientistRepository
from worship_bff.services.content import ContentService
from worship_bff.services.message import MessageService
from worship_bff.services.scientist import ScientistService

logger = get_logger(__name__)


# =============================================================================
# Repositories (wait behind the document store readiness gate)
# =============================================================================


async def get_scientist_repository() -> ScientistRepository:
    store = get_document_store()
    await store.wait_until_ready()
    return ScientistRepository(store.collection(get_app_config().database.collections.scientists))


async def get_message_repository() -> MessageRepository:
    store = get_document_store()
    await store.wait_until_ready()
    return MessageRepository(store.collection(get_app_config().database.collections.messages))


# =============================================================================
# Third-party clients
# =============================================================================


def get_image_host() -> ImageHost:
    settings = get_settings()
    host_config = get_app_config().integrations.image_host
    return CloudinaryImageHost(
        http_client=get_http_client(),
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        api_base=host_config.api_base,
        delivery_base=host_config.delivery_base,
        folder=host_config.folder,
        thumbnail=ImageTransform(**host_config.thumbnail.model_dump()),
    )


def get_bot_verifier() -> BotVerifier:
    settings = get_settings()
    captcha_config = get_app_config().integrations.captcha
    return ChallengeVerifier(
        http_client=get_http_client(),
        turnstile_secret=settings.turnstile_secret_key,
        recaptcha_secret=settings.recaptcha_secret_key,
        turnstile_url=captcha_config.turnstile_verify_url,
        recaptcha_url=captcha_config.recaptcha_verify_url,
        turnstile_max_token_length=captcha_config.turnstile_max_token_length,
    )


def get_wordpress_client() -> WordPressClient:
    return WordPressClient(
        http_client=get_http_client(),
        base_url=get_settings().wp_url,
        wpcom_api_base=get_app_config().integrations.wordpress.wpcom_api_base,
    )


# =============================================================================
# Services
# =============================================================================


def get_scientist_service(
    repo: Annotated[ScientistRepository, Depends(get_scientist_repository)],
    image_host: Annotated[ImageHost, Depends(get_image_host)],
) -> ScientistService:
    app_config = get_app_config()
    upload_limits = app_config.integrations.image_host.upload
    return ScientistService(
        repo=repo,
        image_host=image_host,
        palette=app_config.content.scientists.palette,
        max_upload_bytes=upload_limits.max_bytes,
        allowed_extensions=upload_limits.allowed_extensions,
    )


def get_message_service(
    repo: Annotated[MessageRepository, Depends(get_message_repository)],
    verifier: Annotated[BotVerifier, Depends(get_bot_verifier)],
) -> MessageService:
    guestbook = get_app_config().content.guestbook
    return MessageService(
        repo=repo,
        verifier=verifier,
        anonymous_author=guestbook.anonymous_author,
        content_max_length=guestbook.content_max_length,
        author_max_length=guestbook.author_max_length,
        default_limit=guestbook.default_limit,
        history_default_limit=guestbook.history_default_limit,
        max_limit=guestbook.max_limit,
    )


def get_content_service(
    client: Annotated[WordPressClient, Depends(get_wordpress_client)],
    image_pool: Annotated[ImagePool, Depends(get_image_pool)],
) -> ContentService:
    return ContentService(
        client=client,
        image_pool=image_pool,
        image_alt=get_app_config().content.optimizer.image_alt,
    )


ScientistServiceDep = Annotated[ScientistService, Depends(get_scientist_service)]
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
