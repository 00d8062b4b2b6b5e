"""
Toast sink for headless use: toasts go to the log and to an in-memory history.
"""

import logging
from typing import List, Tuple

from config.features import features
from core.interfaces.messaging import INotifier

logger = logging.getLogger(__name__)


class LogNotifier(INotifier):
    def __init__(self, keep: int = 100):
        self.keep = keep
        self.history: List[Tuple[str, str]] = []

    def _record(self, level: str, message: str) -> None:
        self.history.append((level, message))
        if len(self.history) > self.keep:
            self.history = self.history[-self.keep:]

    def success(self, message: str) -> None:
        self._record("success", message)
        if features.TOASTS_ENABLED:
            logger.info(f"[TOAST] ✅ {message}")

    def error(self, message: str) -> None:
        self._record("error", message)
        if features.TOASTS_ENABLED:
            logger.warning(f"[TOAST] ❌ {message}")

    def info(self, message: str) -> None:
        self._record("info", message)
        if features.TOASTS_ENABLED:
            logger.info(f"[TOAST] {message}")

    def messages(self, level: str = None) -> List[str]:
        return [m for lvl, m in self.history if level is None or lvl == level]
