from storefront_toolkit.notifications.base import LoggingNotifier, Notifier, RecordingNotifier

__all__ = ["LoggingNotifier", "Notifier", "RecordingNotifier"]
