"""Console adapters: notifications through logging, spacing from arguments."""

from __future__ import annotations

import logging

from domain.sampling.ports import Severity

logger = logging.getLogger("grid_heights")

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class LoggingNotificationSink:
    """NotificationSink forwarding every message to a logger."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self.logger = target if target is not None else logger

    def notify(
        self, severity: Severity, message: str, title: str | None = None
    ) -> None:
        text = f"{title}: {message}" if title else message
        for line in text.splitlines() or [""]:
            self.logger.log(_LEVELS[severity], "%s", line)


class FixedSpacingSource:
    """SpacingSource answering with a preset value.

    Stands in for the interactive dialog: the value comes from the command
    line, and the offered default is used when none was given. Range checks
    are left to the grid driver.
    """

    def __init__(self, spacing: float | None = None) -> None:
        self.spacing = spacing

    def request_spacing(self, default: float, minimum: float, maximum: float) -> float:
        if self.spacing is None:
            logger.debug("No spacing given, using default %s m", default)
            return default
        return self.spacing
