"""
Concurrent fan-out of one message to every operator recipient.

Each recipient is delivered to independently: a failure for one recipient is
recorded in the report and never affects the others.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence, Tuple

from logsbot.composer import NotificationPayload, render_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutgoingMessage:
    """Message body plus optional attachment file."""

    body: str
    attachment: Optional[Path] = None


class MessageTransport(Protocol):
    """Delivers a message to one recipient, raising on failure."""

    async def send(self, message: OutgoingMessage, recipient_id: str) -> Any:
        ...


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of delivering to a single recipient."""

    recipient_id: str
    ok: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class DeliveryReport:
    """Aggregate result of one dispatch call."""

    success_count: int = 0
    failure_count: int = 0
    per_recipient: Tuple[DeliveryOutcome, ...] = ()

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[DeliveryOutcome]) -> "DeliveryReport":
        successes = sum(1 for outcome in outcomes if outcome.ok)
        return cls(
            success_count=successes,
            failure_count=len(outcomes) - successes,
            per_recipient=tuple(outcomes),
        )

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count


class FanoutDispatcher:
    """Delivers a payload to many recipients concurrently."""

    def __init__(self, transport: MessageTransport) -> None:
        """
        Initialize the dispatcher.

        Args:
            transport: Message transport used for every recipient
        """
        self.transport = transport

    async def _deliver(self, message: OutgoingMessage, recipient_id: str) -> DeliveryOutcome:
        try:
            result = await self.transport.send(message, recipient_id)
        except Exception as e:
            logger.error(f"Failed to send log to recipient {recipient_id}: {e}")
            return DeliveryOutcome(
                recipient_id=recipient_id, ok=False, reason=str(e) or type(e).__name__
            )

        if result is False:
            logger.error(f"Transport rejected log for recipient {recipient_id}")
            return DeliveryOutcome(
                recipient_id=recipient_id, ok=False, reason="rejected by transport"
            )

        logger.debug(f"Log sent successfully to recipient {recipient_id}")
        return DeliveryOutcome(recipient_id=recipient_id, ok=True)

    async def dispatch(
        self,
        payload: NotificationPayload,
        recipients: Sequence[str],
        attachment: Optional[Path] = None,
    ) -> DeliveryReport:
        """
        Send ``payload`` to every recipient and wait for all attempts to settle.

        Args:
            payload: Composed notification
            recipients: Ordered recipient IDs
            attachment: Optional file attached to every message

        Returns:
            DeliveryReport with one outcome per recipient, in recipient order
        """
        recipients = list(recipients or [])
        if not recipients:
            logger.warning("No recipients configured, nothing to dispatch")
            return DeliveryReport()

        message = OutgoingMessage(body=render_text(payload), attachment=attachment)
        results = await asyncio.gather(
            *(self._deliver(message, recipient_id) for recipient_id in recipients),
            return_exceptions=True,
        )

        outcomes = []
        for recipient_id, result in zip(recipients, results):
            if isinstance(result, DeliveryOutcome):
                outcomes.append(result)
            else:
                # Cancellation or another BaseException escaped the delivery task
                outcomes.append(
                    DeliveryOutcome(
                        recipient_id=recipient_id, ok=False, reason=repr(result)
                    )
                )

        report = DeliveryReport.from_outcomes(outcomes)
        if report.failure_count:
            logger.warning(
                f"Logs sent: {report.success_count} successful, {report.failure_count} failed"
            )
        else:
            logger.info(f"All logs sent successfully to {report.success_count} recipients")
        return report
