from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


load_dotenv()

DEFAULT_TIMEZONE = "Asia/Kolkata"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class EngineSettings:
    default_timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"


def get_settings() -> EngineSettings:
    """
    Load engine settings from environment variables.

    Reads:
      COMPLIANCE_DEFAULT_TIMEZONE (IANA name, default Asia/Kolkata)
      COMPLIANCE_LOG_LEVEL (default INFO)
    """
    tz_name = os.getenv("COMPLIANCE_DEFAULT_TIMEZONE", "").strip() or DEFAULT_TIMEZONE
    _require_timezone(tz_name)
    level = os.getenv("COMPLIANCE_LOG_LEVEL", "").strip().upper() or "INFO"
    if level not in _LOG_LEVELS:
        raise ValueError(f"COMPLIANCE_LOG_LEVEL is not a logging level: {level}")
    return EngineSettings(default_timezone=tz_name, log_level=level)


def configure_logging(settings: EngineSettings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _require_timezone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name}") from exc
