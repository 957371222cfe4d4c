"""
Bot Verification.

Verifies challenge tokens produced by the frontend widget. Two providers
are supported and chosen by token shape: Turnstile tokens are short,
reCAPTCHA tokens are long.

Verification fails closed: any network error, timeout, error status or
malformed body yields False, never an exception.
"""

from abc import ABC, abstractmethod

import httpx

from worship_bff.core.logging import get_logger

logger = get_logger(__name__)


class BotVerifier(ABC):
    """Contract for bot verification providers."""

    @abstractmethod
    async def verify(self, token: str | None) -> bool:
        """Return True only when the provider confirms a human."""


class ChallengeVerifier(BotVerifier):
    """
    Cloudflare Turnstile / Google reCAPTCHA siteverify client.

    Tokens shorter than turnstile_max_token_length are sent to Turnstile
    as a JSON body; all others to reCAPTCHA as query parameters.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        turnstile_secret: str,
        recaptcha_secret: str,
        turnstile_url: str,
        recaptcha_url: str,
        turnstile_max_token_length: int = 100,
    ) -> None:
        self._http = http_client
        self._turnstile_secret = turnstile_secret
        self._recaptcha_secret = recaptcha_secret
        self._turnstile_url = turnstile_url
        self._recaptcha_url = recaptcha_url
        self._turnstile_max_token_length = turnstile_max_token_length

    def provider_for(self, token: str) -> str:
        if len(token) < self._turnstile_max_token_length:
            return "turnstile"
        return "recaptcha"

    async def verify(self, token: str | None) -> bool:
        if not token:
            logger.info("Bot verification skipped: no token")
            return False

        provider = self.provider_for(token)
        try:
            if provider == "turnstile":
                response = await self._http.post(
                    self._turnstile_url,
                    json={"secret": self._turnstile_secret, "response": token},
                )
            else:
                response = await self._http.post(
                    self._recaptcha_url,
                    params={"secret": self._recaptcha_secret, "response": token},
                )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Bot verification request failed",
                extra={"provider": provider, "error": str(e)},
            )
            return False

        success = isinstance(payload, dict) and payload.get("success") is True
        if not success:
            logger.info(
                "Bot verification rejected",
                extra={
                    "provider": provider,
                    "error_codes": payload.get("error-codes") if isinstance(payload, dict) else None,
                },
            )
        return success
