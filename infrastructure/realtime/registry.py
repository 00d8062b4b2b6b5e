"""
Listener registry - event name -> ordered (owner, handler) pairs.
Shared by both channel implementations so on/off semantics are identical.
"""

import inspect
import logging
from typing import Any, Dict, List, Optional, Tuple

from core.interfaces.realtime import Handler

logger = logging.getLogger(__name__)


class ListenerRegistry:
    def __init__(self):
        self._listeners: Dict[str, List[Tuple[Optional[object], Handler]]] = {}

    def add(self, event: str, handler: Handler, owner: Optional[object] = None) -> bool:
        """Register a handler; the same (owner, handler) pair is only kept once"""
        if inspect.iscoroutinefunction(handler):
            raise TypeError(f"Handler for '{event}' must be synchronous; dispatch does not await")
        entries = self._listeners.setdefault(event, [])
        for existing_owner, existing in entries:
            if existing_owner is owner and existing == handler:
                return False
        entries.append((owner, handler))
        return True

    def remove(self, event: str, handler: Optional[Handler] = None, owner: Optional[object] = None) -> int:
        entries = self._listeners.get(event, [])
        kept = [
            (o, h) for o, h in entries
            if (handler is not None and h != handler)
            or (owner is not None and o is not owner)
        ]
        removed = len(entries) - len(kept)
        if kept:
            self._listeners[event] = kept
        else:
            self._listeners.pop(event, None)
        return removed

    def handlers(self, event: str) -> List[Handler]:
        return [h for _, h in self._listeners.get(event, [])]

    def events(self) -> List[str]:
        return list(self._listeners)

    def count(self, event: Optional[str] = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(entries) for entries in self._listeners.values())

    def dispatch(self, event: str, payload: Any) -> int:
        """Run every handler for `event`; one failing handler does not starve the rest"""
        handlers = self.handlers(event)
        for handler in handlers:
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"[REALTIME] Handler for '{event}' failed: {e}", exc_info=True)
        return len(handlers)
