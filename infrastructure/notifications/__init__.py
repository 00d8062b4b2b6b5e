from infrastructure.notifications.log_notifier import LogNotifier

__all__ = ["LogNotifier"]
