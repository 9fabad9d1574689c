"""
HTTP client for the chat gateway.

Sends messages (with optional file attachments) to recipients and performs the
live thread and user lookups the pipeline needs.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from logsbot.config import LogsBotConfig
from logsbot.dispatcher import OutgoingMessage

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """Raised when the gateway does not accept a request."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class HttpMessageTransport:
    """Chat gateway client.

    Endpoints, relative to ``config.api_url``:
        POST /threads/{recipient_id}/messages  (JSON or multipart with attachment)
        GET  /threads/{thread_id}
        GET  /users/{user_id}
    """

    def __init__(self, config: LogsBotConfig):
        """
        Initialize the gateway client.

        Args:
            config: Bot configuration
        """
        self.config = config
        self.base_url = config.api_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.config.timeout_seconds)

    def _require_base_url(self) -> None:
        if not self.base_url:
            raise DeliveryError("Chat gateway URL not configured")

    async def send(self, message: OutgoingMessage, recipient_id: str) -> bool:
        """
        Send a message to one recipient.

        Args:
            message: Body and optional attachment
            recipient_id: Recipient thread or user ID

        Returns:
            True on success

        Raises:
            DeliveryError: If the gateway rejects the message or is unreachable
        """
        self._require_base_url()
        url = f"{self.base_url}/threads/{recipient_id}/messages"

        try:
            async with aiohttp.ClientSession(headers=self._headers()) as session:
                if message.attachment is not None:
                    with open(message.attachment, "rb") as handle:
                        form = aiohttp.FormData()
                        form.add_field("body", message.body)
                        form.add_field(
                            "attachment", handle, filename=message.attachment.name
                        )
                        async with session.post(
                            url, data=form, timeout=self._timeout()
                        ) as response:
                            await self._check_response(response, recipient_id)
                else:
                    async with session.post(
                        url, json={"body": message.body}, timeout=self._timeout()
                    ) as response:
                        await self._check_response(response, recipient_id)

        except asyncio.TimeoutError as e:
            raise DeliveryError(f"Send to {recipient_id} timed out") from e
        except aiohttp.ClientError as e:
            raise DeliveryError(f"Send to {recipient_id} failed: {e}") from e
        except OSError as e:
            raise DeliveryError(f"Could not read attachment: {e}") from e

        return True

    async def _check_response(self, response: aiohttp.ClientResponse, target: str) -> None:
        if 200 <= response.status < 300:
            return
        if response.status == 429:
            retry_after = response.headers.get("Retry-After", "?")
            raise DeliveryError(
                f"Gateway rate limit hit for {target}, retry after {retry_after}s",
                status=429,
            )
        error_text = await response.text()
        raise DeliveryError(
            f"Gateway request for {target} failed: {response.status} - {error_text}",
            status=response.status,
        )

    async def _get_json(self, path: str) -> Dict[str, Any]:
        self._require_base_url()
        try:
            async with aiohttp.ClientSession(headers=self._headers()) as session:
                async with session.get(
                    f"{self.base_url}{path}", timeout=self._timeout()
                ) as response:
                    await self._check_response(response, path)
                    return await response.json()
        except asyncio.TimeoutError as e:
            raise DeliveryError(f"Request {path} timed out") from e
        except aiohttp.ClientError as e:
            raise DeliveryError(f"Request {path} failed: {e}") from e

    async def get_thread_info(self, thread_id: str) -> Dict[str, Any]:
        """Fetch live thread info (threadName, participantIDs, isSubscribed)."""
        return await self._get_json(f"/threads/{thread_id}")

    async def get_name(self, user_id: str) -> str:
        """Fetch a user's display name."""
        data = await self._get_json(f"/users/{user_id}")
        return data.get("name") or str(user_id)
