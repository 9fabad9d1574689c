"""
Process lifecycle tracking.

Remembers when the current session started so that startup is announced once
per process and every restart can report the uptime of the session it ends.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Callable, Optional

logger = logging.getLogger(__name__)

def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class LifecycleKind(Enum):
    """Process-level occurrences that are announced to operators."""

    STARTUP = "startup"
    RESTART = "restart"


@dataclass(frozen=True)
class LifecycleIntent:
    """Request to announce a lifecycle event."""

    kind: LifecycleKind
    at_ms: int
    previous_uptime: Optional[str] = None


def format_uptime(milliseconds: int) -> str:
    """
    Render a duration using its largest non-zero unit and the next one down.

    Examples: ``1d 1h``, ``3h 42m``, ``9m 5s``, ``17s``, ``0s``.
    """
    seconds = max(int(milliseconds), 0) // 1000
    minutes, secs = divmod(seconds, 60)
    hours, mins = divmod(minutes, 60)
    days, hrs = divmod(hours, 24)

    if days > 0:
        return f"{days}d {hrs}h"
    if hours > 0:
        return f"{hours}h {mins}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{seconds}s"


class SessionTracker:
    """Owns the process start time and the startup-announced flag.

    The start time is taken when the tracker is created, so a restart reports
    a real uptime even if startup was never announced.
    """

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        """
        Initialize the tracker.

        Args:
            clock: Callable returning the current time in milliseconds
        """
        self._clock = clock
        self._lock = Lock()
        self._process_start_ms: int = clock()
        self._has_announced_startup = False

    @property
    def process_start_ms(self) -> int:
        with self._lock:
            return self._process_start_ms

    @property
    def has_announced_startup(self) -> bool:
        with self._lock:
            return self._has_announced_startup

    def on_startup(self) -> Optional[LifecycleIntent]:
        """
        Record process startup.

        Returns:
            An intent on the first call of the session, None afterwards
        """
        with self._lock:
            if self._has_announced_startup:
                return None

            now = self._clock()
            self._process_start_ms = now
            self._has_announced_startup = True
            return LifecycleIntent(kind=LifecycleKind.STARTUP, at_ms=now)

    def on_restart(self) -> LifecycleIntent:
        """
        Close the current session and start a new one.

        Returns:
            An intent carrying the formatted uptime of the closed session
        """
        with self._lock:
            now = self._clock()
            previous_uptime = format_uptime(now - self._process_start_ms)
            self._process_start_ms = now
            return LifecycleIntent(
                kind=LifecycleKind.RESTART, at_ms=now, previous_uptime=previous_uptime
            )

    def uptime_ms(self) -> int:
        """Milliseconds since the current session started."""
        with self._lock:
            return self._clock() - self._process_start_ms

    def reset(self) -> None:
        """Start a fresh session so the next startup is announced again."""
        with self._lock:
            self._process_start_ms = self._clock()
            self._has_announced_startup = False
        logger.info("Session state reset")
