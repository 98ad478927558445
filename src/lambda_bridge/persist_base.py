"""Abstract base for queue backends.

Defines the interface the reactors poll and acknowledge through, plus the
send and metrics calls used by the command line tools. Implementations (e.g.
PersistSQS) provide the concrete service calls.
"""

from abc import ABC, abstractmethod

from lambda_bridge.mapping_model_dto import QueueMessage


class PersistBase(ABC):
    """Abstract base class for queue access.

    Every method is a coroutine so many reactors can share one instance on a
    single event loop. Implementations must be safe for concurrent use.
    """

    @abstractmethod
    async def receive_messages(
        self,
        queue_url: str,
        max_number_of_messages: int,
        wait_time_seconds: int,
        visibility_timeout: int | None = None,
    ) -> list[QueueMessage]:
        """Return up to max_number_of_messages messages; an empty list when none arrive.

        Raises ReceiveError if the queue cannot be polled.
        """
        pass

    @abstractmethod
    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Permanently delete the message with the given receipt handle. Raises on failure."""
        pass

    @abstractmethod
    async def send_message(self, queue_url: str, body: str) -> str:
        """Append a message to the queue. Returns the message ID."""
        pass

    @abstractmethod
    async def metrics(self, queue_url: str) -> dict:
        """Return queue attributes (e.g. visible and in-flight counts)."""
        pass

    def close(self) -> None:
        """Release client resources; the default holds none."""
        return None
