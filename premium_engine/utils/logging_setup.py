from __future__ import annotations

import logging
from typing import Optional

from premium_engine.utils.config import get_log_level

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once (basicConfig is a no-op if handlers exist)."""
    logging.basicConfig(
        level=(level or get_log_level()),
        format=LOG_FORMAT,
    )
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
