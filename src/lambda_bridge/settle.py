"""Settle a batch of awaitables without short-circuiting on failure."""

import asyncio
from typing import Any, Awaitable, Iterable


class Settlement:
    """Terminal outcome of one operation: fulfilled with a value or rejected with a reason."""

    __slots__ = ("fulfilled", "value", "reason")

    def __init__(self, fulfilled: bool, value: Any = None, reason: BaseException | None = None) -> None:
        self.fulfilled = fulfilled
        self.value = value
        self.reason = reason

    @classmethod
    def success(cls, value: Any) -> "Settlement":
        return cls(True, value=value)

    @classmethod
    def failure(cls, reason: BaseException) -> "Settlement":
        return cls(False, reason=reason)

    @property
    def rejected(self) -> bool:
        return not self.fulfilled

    def __repr__(self) -> str:
        if self.fulfilled:
            return f"Settlement(fulfilled, value={self.value!r})"
        return f"Settlement(rejected, reason={self.reason!r})"


async def settle_all(awaitables: Iterable[Awaitable[Any]]) -> list[Settlement]:
    """Wait for every awaitable and return one Settlement per input, in input order.

    All awaitables are scheduled before any is awaited. A failure never cancels
    a sibling and never makes this coroutine raise; an awaitable that itself
    returns a Settlement is passed through unchanged. Cancelling the caller
    still cancels the whole batch.
    """
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    settlements = []
    for result in results:
        if isinstance(result, Settlement):
            settlements.append(result)
        elif isinstance(result, BaseException):
            settlements.append(Settlement.failure(result))
        else:
            settlements.append(Settlement.success(result))
    return settlements
