"""
Message Service.

Guestbook rules: content checks, anonymous authorship and bot
verification before anything is written.
"""

from worship_bff.core.exceptions import ValidationError
from worship_bff.core.utils import from_epoch_millis
from worship_bff.integrations.captcha import BotVerifier
from worship_bff.models.message import Message
from worship_bff.repositories.message import MessageRepository
from worship_bff.schemas.message import MessageCreate
from worship_bff.services.base import BaseService

ANONYMOUS_AUTHOR = "匿名信徒"


class MessageService(BaseService):
    """
    Service for guestbook messages.

    Content is checked before the verification call, so an empty message
    is rejected without contacting the CAPTCHA provider.
    """

    def __init__(
        self,
        repo: MessageRepository,
        verifier: BotVerifier,
        anonymous_author: str = ANONYMOUS_AUTHOR,
        content_max_length: int = 500,
        author_max_length: int = 50,
        default_limit: int = 5,
        history_default_limit: int = 10,
        max_limit: int = 100,
    ) -> None:
        super().__init__()
        self.repo = repo
        self.verifier = verifier
        self.anonymous_author = anonymous_author
        self.content_max_length = content_max_length
        self.author_max_length = author_max_length
        self.default_limit = default_limit
        self.history_default_limit = history_default_limit
        self.max_limit = max_limit

    def _resolve_limit(self, limit: int | None, default: int) -> int:
        if limit is None or limit < 1:
            return default
        return min(limit, self.max_limit)

    async def post_message(self, data: MessageCreate) -> Message:
        """
        Validate, verify and store a guestbook message.

        Raises:
            ValidationError: Empty or oversized content/author, or a failed
                bot verification
        """
        content = (data.content or "").strip()
        if not content:
            raise ValidationError("Message content is required", details={"field": "content"})
        self._validate_string_length(content, "content", max_length=self.content_max_length)

        if data.is_anonymous:
            author = self.anonymous_author
        else:
            author = (data.author or "").strip() or self.anonymous_author
            self._validate_string_length(author, "author", max_length=self.author_max_length)

        if not await self.verifier.verify(data.recaptcha_token):
            raise ValidationError("Bot verification failed", details={"field": "recaptchaToken"})

        self._log_operation("Creating message", anonymous=data.is_anonymous, length=len(content))
        return await self._execute_db_operation(
            "create_message",
            self.repo.create(content=content, author=author, is_anonymous=data.is_anonymous),
        )

    async def list_latest(self, limit: int | None = None) -> list[Message]:
        """Newest messages first."""
        return await self._execute_db_operation(
            "list_latest_messages",
            self.repo.get_latest(self._resolve_limit(limit, self.default_limit)),
        )

    async def list_history(
        self,
        before_ms: int | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        """
        Messages older than an epoch-millisecond cursor, newest first.

        Args:
            before_ms: Exclusive upper bound on createdAt; None returns the
                newest page
            limit: Page size
        """
        before = None
        if before_ms is not None:
            try:
                before = from_epoch_millis(before_ms)
            except (OverflowError, OSError, ValueError) as e:
                raise ValidationError("Invalid before timestamp", details={"before": before_ms}) from e
        return await self._execute_db_operation(
            "list_message_history",
            self.repo.get_before(before, self._resolve_limit(limit, self.history_default_limit)),
        )
