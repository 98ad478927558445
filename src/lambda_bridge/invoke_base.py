"""Abstract base for invocation backends."""

from abc import ABC, abstractmethod


class InvokeBase(ABC):
    """Fire-and-forget invocation of a remote function.

    invoke_async reports that the request was accepted, not that the
    downstream work finished.
    """

    @abstractmethod
    async def invoke_async(self, function_name: str, payload: bytes) -> dict:
        """Queue an asynchronous invocation. Returns the service acknowledgment; raises on failure."""
        pass

    def close(self) -> None:
        """Release client resources; the default holds none."""
        return None
