"""
User-visible notices.

The guard and the reaction ledger report denials and failed writes to the
person at the keyboard through a 'Notifier'. What "visible" means (a toast, an
alert, a flash message) is up to the embedding view layer.

'LoggingNotifier' writes notices to the loguru logger and is the default.
'RecordingNotifier' keeps them in a list for tests and scripted scenarios.
"""

from abc import ABC, abstractmethod

from loguru import logger


class Notifier(ABC):
    @abstractmethod
    def notify(self, message: str) -> None:
        """Show 'message' to the user once."""
        pass


class LoggingNotifier(Notifier):
    def notify(self, message: str) -> None:
        logger.info(f"Notice: {message}")


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
