"""
User-facing side effects - transient toasts and hard navigation.
Stores talk to these instead of a UI toolkit.
"""

from abc import ABC, abstractmethod


class INotifier(ABC):
    """Transient user-facing notification (toast) sink"""

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass

    @abstractmethod
    def info(self, message: str) -> None:
        pass


class INavigator(ABC):
    """Hard navigation target (full reload, not an in-app route change)"""

    @abstractmethod
    async def redirect(self, path: str) -> None:
        pass
