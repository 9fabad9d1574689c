"""
Attachment discovery for outgoing logs.

Probes a fixed, ordered list of image files and attaches the first one found.
No candidate existing is normal and means the log is sent without attachment.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

ATTACHMENT_NAME = "log"
ATTACHMENT_EXTENSIONS = ("gif", "jpg", "png")
ATTACHMENT_DIRS = ("tmp", "assets")


def default_candidates(base_dir: Union[str, Path]) -> List[Path]:
    """
    Build the ordered candidate list under ``base_dir``.

    Order: tmp/log.gif, assets/log.gif, tmp/log.jpg, assets/log.jpg,
    tmp/log.png, assets/log.png.
    """
    base = Path(base_dir)
    return [
        base / directory / f"{ATTACHMENT_NAME}.{extension}"
        for extension in ATTACHMENT_EXTENSIONS
        for directory in ATTACHMENT_DIRS
    ]


def resolve_attachment(candidates: Iterable[Union[str, Path]]) -> Optional[Path]:
    """Return the first existing file among ``candidates``, or None."""
    for candidate in candidates:
        path = Path(candidate)
        try:
            if path.is_file():
                logger.info(f"Using attachment: {path.name}")
                return path
        except OSError as e:
            logger.debug(f"Skipping attachment candidate {path}: {e}")
    return None
