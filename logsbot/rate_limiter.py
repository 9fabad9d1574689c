"""
Per-group cooldown gate for membership notices.

Prevents notification spam when the host delivers several membership events
for the same group in quick succession.
"""

import logging
from collections import OrderedDict
from threading import Lock
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Cooldown rate limiter keyed by group ID.

    Each key remembers the timestamp of its last accepted event. The table is
    unbounded unless ``max_keys`` is set, in which case the least recently
    accepted key is evicted first.
    """

    def __init__(self, max_keys: int = 0) -> None:
        """
        Initialize the rate limiter.

        Args:
            max_keys: Maximum number of tracked keys (0 = unbounded)
        """
        self._lock = Lock()
        self._max_keys = max_keys
        self._last_accepted: "OrderedDict[str, int]" = OrderedDict()
        self._rejected = 0

    def admit(self, key: str, now: int, window_ms: int) -> bool:
        """
        Decide whether an event for ``key`` at ``now`` may pass.

        Args:
            key: Group ID
            now: Event time in milliseconds
            window_ms: Cooldown window in milliseconds

        Returns:
            True if admitted (and recorded), False if within the cooldown
        """
        with self._lock:
            last = self._last_accepted.get(key)
            if last is not None and now - last < window_ms:
                self._rejected += 1
                logger.debug(
                    f"Cooldown active for {key}: {window_ms - (now - last)}ms remaining"
                )
                return False

            self._last_accepted[key] = now
            self._last_accepted.move_to_end(key)

            if self._max_keys and len(self._last_accepted) > self._max_keys:
                evicted, _ = self._last_accepted.popitem(last=False)
                logger.debug(f"Evicted rate limit entry for {evicted}")

            return True

    def last_accepted(self, key: str) -> Optional[int]:
        """Timestamp of the last accepted event for ``key``, if any."""
        with self._lock:
            return self._last_accepted.get(key)

    def get_stats(self) -> Dict[str, int]:
        """
        Get current rate limit statistics.

        Returns:
            Dictionary with 'tracked_keys' and 'rejected'
        """
        with self._lock:
            return {
                "tracked_keys": len(self._last_accepted),
                "rejected": self._rejected,
            }

    def reset(self, key: Optional[str] = None) -> None:
        """
        Reset rate limit records.

        Args:
            key: If provided, reset only this key. Otherwise reset all.
        """
        with self._lock:
            if key is not None:
                self._last_accepted.pop(key, None)
            else:
                self._last_accepted.clear()
                self._rejected = 0
