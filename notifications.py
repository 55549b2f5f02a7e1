import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional, Tuple

from config import settings

logger = logging.getLogger(__name__)


class NotificationSink(ABC):
    """Delivers a text message to a user identifier.

    Implementations must not block indefinitely and must not raise; the
    library manager treats a send as fire-and-forget.
    """

    @abstractmethod
    def send_notification(self, borrower: str, message: str) -> None:
        ...


class EmailService(NotificationSink):
    """Mail service that only logs what it would send."""

    def __init__(self, sender: Optional[str] = None) -> None:
        self.sender = sender or settings.smtp_from_email

    def send_notification(self, borrower: str, message: str) -> None:
        logger.info(f"Sending email to {borrower} (from {self.sender}): {message}")


class RecordingNotifier(EmailService):
    """EmailService that also keeps the most recent messages in an outbox.

    With `max_messages` set, the oldest messages are dropped once the
    outbox is full.
    """

    def __init__(self, sender: Optional[str] = None, max_messages: Optional[int] = None) -> None:
        super().__init__(sender)
        self._messages: Deque[Tuple[str, str]] = deque(maxlen=max_messages)

    @property
    def outbox(self) -> List[Tuple[str, str]]:
        return list(self._messages)

    @property
    def max_messages(self) -> Optional[int]:
        return self._messages.maxlen

    def send_notification(self, borrower: str, message: str) -> None:
        super().send_notification(borrower, message)
        self._messages.append((borrower, message))

    def messages_for(self, borrower: str) -> List[str]:
        return [message for recipient, message in self.outbox if recipient == borrower]

    def clear(self) -> None:
        self._messages.clear()
