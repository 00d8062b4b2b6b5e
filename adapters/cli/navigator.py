"""
Terminal navigator - there is no page to reload, so a hard redirect is logged
and remembered for the command loop to act on.
"""

import logging
from typing import List, Optional

from core.interfaces.messaging import INavigator

logger = logging.getLogger(__name__)


class LogNavigator(INavigator):
    def __init__(self):
        self.location: Optional[str] = None
        self.history: List[str] = []

    async def redirect(self, path: str) -> None:
        logger.warning(f"[NAV] Redirect to {path}")
        self.location = path
        self.history.append(path)
