"""
Configuration management for the group log bot.

Handles environment variables for the bot identity, operator recipients,
cooldown window, chat gateway access and logging.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_ASSET_DIR = str(Path(__file__).resolve().parent)


def _get_bool_env(key: str, default: bool = False) -> bool:
    """Parse boolean environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def _parse_recipients(raw: Optional[str]) -> List[str]:
    """Parse a comma-separated recipient list, preserving order."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class LogsBotConfig:
    """Configuration for the group log bot.

    All settings can be overridden via environment variables.

    Attributes:
        bot_id: The bot's own participant ID
        recipients: Ordered operator recipient IDs
        enabled: Master switch for every entry point
        cooldown_ms: Minimum interval between two notices for the same group
        rate_limit_max_keys: Bound on tracked groups (0 = unbounded)
        api_url: Base URL of the chat gateway
        api_token: Optional bearer token for the chat gateway
        timeout_seconds: Per-request timeout for sends and live lookups
        asset_dir: Directory holding the tmp/ and assets/ attachment folders
        time_format: strftime format for rendered timestamps
        timezone: IANA timezone for rendered timestamps
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_path: Directory for the rotating JSON log file (None = console only)
        log_file_max_bytes: Maximum size of log file before rotation
        log_file_backup_count: Number of backup log files to keep
    """

    bot_id: str = ""
    recipients: List[str] = field(default_factory=list)
    enabled: bool = True

    cooldown_ms: int = 3000
    rate_limit_max_keys: int = 0

    api_url: str = ""
    api_token: Optional[str] = None
    timeout_seconds: int = 10

    asset_dir: str = DEFAULT_ASSET_DIR
    time_format: str = "%d/%m/%Y %H:%M:%S"
    timezone: str = "UTC"

    log_level: str = "INFO"
    log_path: Optional[str] = None
    log_file_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_file_backup_count: int = 5

    @classmethod
    def from_env(cls) -> "LogsBotConfig":
        """Create configuration from environment variables.

        Environment variables:
            LOGSBOT_BOT_ID: Bot participant ID (default: empty)
            LOGSBOT_RECIPIENTS: Comma-separated recipient IDs (default: empty)
            LOGSBOT_ENABLED: Master switch (default: true)
            LOGSBOT_COOLDOWN_MS: Cooldown window in ms (default: 3000)
            LOGSBOT_RATE_LIMIT_MAX_KEYS: Tracked group bound (default: 0)
            LOGSBOT_API_URL: Chat gateway base URL (default: empty)
            LOGSBOT_API_TOKEN: Chat gateway token (default: unset)
            LOGSBOT_TIMEOUT: Request timeout in seconds (default: 10)
            LOGSBOT_ASSET_DIR: Attachment base directory (default: package dir)
            LOGSBOT_TIME_FORMAT: Timestamp format (default: %d/%m/%Y %H:%M:%S)
            LOGSBOT_TIMEZONE: Timestamp timezone (default: UTC)
            LOG_LEVEL: Logging level (default: INFO)
            LOG_PATH: Log file directory (default: unset)
            LOG_FILE_MAX_BYTES: Max log file size (default: 10MB)
            LOG_FILE_BACKUP_COUNT: Number of backup files (default: 5)

        Returns:
            LogsBotConfig instance with values from environment
        """
        return cls(
            bot_id=os.getenv("LOGSBOT_BOT_ID", ""),
            recipients=_parse_recipients(os.getenv("LOGSBOT_RECIPIENTS")),
            enabled=_get_bool_env("LOGSBOT_ENABLED", True),
            cooldown_ms=int(os.getenv("LOGSBOT_COOLDOWN_MS", "3000")),
            rate_limit_max_keys=int(os.getenv("LOGSBOT_RATE_LIMIT_MAX_KEYS", "0")),
            api_url=os.getenv("LOGSBOT_API_URL", ""),
            api_token=os.getenv("LOGSBOT_API_TOKEN") or None,
            timeout_seconds=int(os.getenv("LOGSBOT_TIMEOUT", "10")),
            asset_dir=os.getenv("LOGSBOT_ASSET_DIR", DEFAULT_ASSET_DIR),
            time_format=os.getenv("LOGSBOT_TIME_FORMAT", "%d/%m/%Y %H:%M:%S"),
            timezone=os.getenv("LOGSBOT_TIMEZONE", "UTC"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_path=os.getenv("LOG_PATH") or None,
            log_file_max_bytes=int(
                os.getenv("LOG_FILE_MAX_BYTES", str(10 * 1024 * 1024))
            ),
            log_file_backup_count=int(os.getenv("LOG_FILE_BACKUP_COUNT", "5")),
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.cooldown_ms < 0:
            raise ValueError(f"cooldown_ms must be >= 0, got {self.cooldown_ms}")

        if self.rate_limit_max_keys < 0:
            raise ValueError(
                f"rate_limit_max_keys must be >= 0, got {self.rate_limit_max_keys}"
            )

        if self.timeout_seconds < 1:
            raise ValueError(
                f"timeout_seconds must be >= 1, got {self.timeout_seconds}"
            )

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {valid_log_levels}"
            )

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Invalid timezone: {self.timezone}") from e

    @property
    def primary_recipient(self) -> Optional[str]:
        """First configured recipient, used for error notices."""
        return self.recipients[0] if self.recipients else None

    def has_recipients(self) -> bool:
        """Check if at least one operator recipient is configured."""
        return bool(self.recipients)

    def __repr__(self) -> str:
        """String representation with masked token."""
        return (
            f"LogsBotConfig("
            f"bot_id='{self.bot_id}', "
            f"recipients={self.recipients}, "
            f"enabled={self.enabled}, "
            f"cooldown_ms={self.cooldown_ms}, "
            f"api_url='{self.api_url}', "
            f"api_token={'***' if self.api_token else None}, "
            f"log_level='{self.log_level}')"
        )
