"""Event sink interface."""

from abc import ABC, abstractmethod

from microlend.models import Event


class EventSink(ABC):
    """Receives an event for every ledger entry and audit log written."""

    @abstractmethod
    def publish(self, event: Event) -> None:
        """Publish a single event."""

    def close(self) -> None:
        """Flush and release resources."""
