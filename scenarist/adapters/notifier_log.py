from __future__ import annotations

import logging
from typing import Optional

from scenarist.domain.errors import AdaptiveError, NotifyLevel


class LogNotifier:
    """Default notifier writing adaptive errors to a stdlib logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("scenarist.notifications")

    def post(self, error: AdaptiveError, level: NotifyLevel) -> None:
        level = NotifyLevel.parse(level)
        if error.details:
            self.logger.log(
                level.logging_level,
                "%s: %s %s",
                error.code,
                error.message(),
                error.details,
            )
        else:
            self.logger.log(level.logging_level, "%s: %s", error.code, error.message())


__all__ = ["LogNotifier"]
