"""
Last-resort error notification.

Tells a single operator that the pipeline failed. Never raises.
"""

import logging
from typing import Optional

from logsbot.composer import MessageCatalog, compose_error_notice, render_text
from logsbot.dispatcher import MessageTransport, OutgoingMessage

logger = logging.getLogger(__name__)


class ErrorReporter:
    """Sends one best-effort error notice to the primary recipient."""

    def __init__(
        self, transport: MessageTransport, catalog: Optional[MessageCatalog] = None
    ) -> None:
        self.transport = transport
        self.catalog = catalog or MessageCatalog()

    async def report_failure(
        self, error: BaseException, primary_recipient: Optional[str]
    ) -> bool:
        """
        Notify ``primary_recipient`` about ``error``.

        Returns:
            True if the notice was handed to the transport successfully
        """
        if not primary_recipient:
            logger.error(f"No recipient for error notice: {error}")
            return False

        try:
            body = render_text(compose_error_notice(error, self.catalog))
            result = await self.transport.send(OutgoingMessage(body=body), primary_recipient)
        except Exception as notify_error:
            logger.error(f"Could not send error notification: {notify_error}")
            return False

        return result is not False
