"""
Gemini generateContent client
- httpx.AsyncClient based
- sequential retry with exponential backoff (no jitter, no cap)
- 400/403 and unknown statuses fail fast, 429/5xx/transport errors retry
"""
import asyncio
from typing import Optional

import httpx

from src.config import config
from src.errors import (
    ProviderError,
    ProviderRequestError,
    ProviderTransientError,
    ProviderUnavailableError,
    ProviderUnhandledStatusError,
)
from src.utils.logger import logger


def _error_message(response: httpx.Response) -> str:
    """Gemini puts the reason in {"error": {"message": ...}}; fall back to the reason phrase."""
    try:
        data = response.json()
    except ValueError:
        data = {}
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return response.reason_phrase


class GeminiClient:
    """Async client for a single Gemini model."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model or config.GEMINI_MODEL
        self.timeout = timeout if timeout is not None else config.GEMINI_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else config.GEMINI_MAX_RETRIES
        self.base_delay = base_delay if base_delay is not None else config.GEMINI_RETRY_BASE_DELAY
        self._client = httpx.AsyncClient(
            base_url=base_url or config.GEMINI_API_BASE,
            timeout=httpx.Timeout(self.timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    @property
    def endpoint(self) -> str:
        return f"/models/{self.model}:generateContent"

    async def _attempt(self, payload: dict) -> dict:
        """One POST. Returns the decoded envelope or raises a ProviderError subclass."""
        try:
            response = await self._client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
            )
        except httpx.TransportError as e:
            raise ProviderTransientError(f"Request to Gemini failed: {e!r}") from e

        if not response.is_success:
            status = response.status_code
            message = _error_message(response)

            if status in (400, 403):
                raise ProviderRequestError(
                    f"Gemini API Failed (Status: {status}). Check Key validity, "
                    f"Billing, and API Enablement. Message: {message}"
                )

            if status == 429 or status >= 500:
                raise ProviderTransientError(f"API returned status {status}. Message: {message}")

            raise ProviderUnhandledStatusError(f"API returned unhandled status {status}. Message: {message}")

        try:
            return response.json()
        except ValueError as e:
            raise ProviderTransientError(f"Gemini returned an unreadable response body: {e}") from e

    async def generate_content(self, payload: dict) -> dict:
        """
        POST the payload, retrying transient failures.
        Waits base_delay * 2**attempt between attempts, never after the last one.
        """
        last_error: Optional[ProviderError] = None

        for attempt in range(self.max_retries):
            try:
                return await self._attempt(payload)
            except (ProviderRequestError, ProviderUnhandledStatusError) as e:
                logger.error(f"Gemini API call failed without retry: {e}")
                raise
            except ProviderTransientError as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    delay = self.base_delay * (2 ** attempt)
                    logger.warning(
                        f"[Retry {attempt + 1}/{self.max_retries}] API call failed: {e}. "
                        f"Delaying {delay}s..."
                    )
                    await asyncio.sleep(delay)

        logger.error(f"Gemini API call failed after {self.max_retries} attempts: {last_error}")
        raise ProviderUnavailableError(str(last_error) if last_error else None)
