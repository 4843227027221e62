"""Defaults for httpcurl, overridable through the environment."""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def env_number(name, default, cast):
    """Read a numeric setting; a bad value falls back to the default"""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, not a valid %s; using %r", name, raw, cast.__name__, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r, must be positive; using %r", name, raw, default)
        return default
    return value


HTTP_PORT: int = env_number("HTTPCURL_HTTP_PORT", 80, int)
HTTPS_PORT: int = env_number("HTTPCURL_HTTPS_PORT", 443, int)

# Seconds for connect, write and read; unset means block forever
TIMEOUT: Optional[float] = env_number("HTTPCURL_TIMEOUT", None, float)

LOG_LEVEL: str = os.environ.get("HTTPCURL_LOG_LEVEL", "WARNING").strip().upper()
if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    logger.warning("Ignoring HTTPCURL_LOG_LEVEL=%r; using WARNING", LOG_LEVEL)
    LOG_LEVEL = "WARNING"
LOG_FORMAT: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
