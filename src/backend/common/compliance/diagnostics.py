"""Fire-and-forget diagnostic sink used by rules and the runner.

Callers pass `{message, type, data}`; nothing here feeds back into rule output.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

logger = logging.getLogger("common.compliance")

LogType = Literal["error", "info"]


def log(message: str, type: LogType = "info", data: Any = None) -> None:
    level = logging.ERROR if type == "error" else logging.INFO
    exc_info = data if isinstance(data, BaseException) else None
    extra = {"compliance_data": data} if data is not None and exc_info is None else None
    logger.log(level, message, exc_info=exc_info, extra=extra)
