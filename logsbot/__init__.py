"""
Group log bot: operator alerts for bot membership changes.

This module tells a configured set of operators when the bot is added to or
removed from a group, and announces process startup and restarts.

Main components:
- LogsBot: Pipeline entry points for the host runtime
- RateLimiter: Per-group cooldown gate
- SessionTracker: Startup/restart tracking and uptime formatting
- ThreadEnricher: Best-effort group metadata lookup
- FanoutDispatcher: Concurrent delivery to every operator
- ErrorReporter: Best-effort error notice to the primary operator
- LogsBotConfig: Configuration management

Example:
    from logsbot import LogsBot

    bot = LogsBot()
    await bot.on_ready()
    report = await bot.handle_event(raw_event)
"""

from .composer import MessageCatalog, NotificationPayload
from .config import LogsBotConfig
from .dispatcher import DeliveryOutcome, DeliveryReport, FanoutDispatcher
from .enricher import ThreadSnapshot
from .events import MembershipEvent, MembershipKind
from .logsbot import LogsBot
from .session import SessionTracker, format_uptime

__version__ = "2.1.0"
__all__ = [
    "DeliveryOutcome",
    "DeliveryReport",
    "FanoutDispatcher",
    "LogsBot",
    "LogsBotConfig",
    "MembershipEvent",
    "MembershipKind",
    "MessageCatalog",
    "NotificationPayload",
    "SessionTracker",
    "ThreadSnapshot",
    "format_uptime",
]
