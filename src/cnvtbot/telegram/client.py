"""
Telegram Bot API Client

Thin httpx wrapper over the handful of Bot API methods the bot uses.
Transient network errors are retried; API errors are not.
"""

import logging
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from cnvtbot.telegram.schemas import InlineQueryResultArticle

logger = logging.getLogger(__name__)


class TelegramError(Exception):
    """Telegram API call failed."""

    def __init__(
        self,
        message: str,
        method: str,
        error_type: str = "UNKNOWN",
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.method = method
        self.error_type = error_type
        self.details = details or {}


class TelegramClient:
    """
    Outbound half of the messaging transport.

    Usage:
        client = TelegramClient(token)
        await client.send_message(chat_id, "Try /help command.")
        await client.close()
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.base_url = f"{api_url.rstrip('/')}/bot{token}"
        self.timeout = timeout
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._http.aclose()

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True
    )
    async def _post(self, method: str, payload: dict[str, Any], timeout: float | None) -> httpx.Response:
        return await self._http.post(
            f"{self.base_url}/{method}",
            json=payload,
            timeout=timeout or self.timeout
        )

    async def call(self, method: str, payload: dict[str, Any] | None = None, timeout: float | None = None) -> Any:
        """
        Invoke a Bot API method and return its `result`.

        Raises:
            TelegramError: On network failure or an `ok: false` answer
        """
        try:
            response = await self._post(method, payload or {}, timeout)
            data = response.json()
        except httpx.TimeoutException as e:
            raise TelegramError(
                message="Request timeout",
                method=method,
                error_type="TIMEOUT",
                details={"timeout_seconds": timeout or self.timeout}
            ) from e
        except httpx.RequestError as e:
            raise TelegramError(
                message=f"Request failed: {e}",
                method=method,
                error_type="NETWORK"
            ) from e
        except ValueError as e:
            raise TelegramError(
                message=f"Invalid response: HTTP {response.status_code} body is not JSON",
                method=method,
                error_type="PARSE_ERROR"
            ) from e

        if not isinstance(data, dict) or not data.get("ok"):
            error_code = data.get("error_code") if isinstance(data, dict) else None
            description = data.get("description") if isinstance(data, dict) else None
            raise TelegramError(
                message=description or f"{method} failed with HTTP {response.status_code}",
                method=method,
                error_type=f"HTTP_{error_code or response.status_code}",
                details={"response": data}
            )

        return data.get("result")

    async def send_message(self, chat_id: int, text: str) -> None:
        await self.call("sendMessage", {"chat_id": chat_id, "text": text})

    async def answer_inline_query(
        self,
        inline_query_id: str,
        results: list[InlineQueryResultArticle],
        cache_time: int = 0
    ) -> None:
        await self.call(
            "answerInlineQuery",
            {
                "inline_query_id": inline_query_id,
                "results": [result.model_dump() for result in results],
                "cache_time": cache_time,
            }
        )

    async def get_updates(self, offset: int | None = None, timeout: int = 30) -> list[dict[str, Any]]:
        """Raw updates; validation happens per update so one bad item cannot stall the offset."""
        payload: dict[str, Any] = {
            "timeout": timeout,
            "allowed_updates": ["message", "inline_query"],
        }
        if offset is not None:
            payload["offset"] = offset

        # The HTTP timeout must outlast the long poll
        result = await self.call("getUpdates", payload, timeout=timeout + self.timeout)
        return list(result or [])

    async def set_webhook(self, url: str, secret_token: str = "") -> None:
        payload: dict[str, Any] = {
            "url": url,
            "allowed_updates": ["message", "inline_query"],
        }
        if secret_token:
            payload["secret_token"] = secret_token
        await self.call("setWebhook", payload)
        logger.info(f"Webhook registered: {url}")

    async def delete_webhook(self) -> None:
        await self.call("deleteWebhook")
