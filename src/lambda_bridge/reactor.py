"""The poll-dispatch-settle loop for a single mapping.

Each iteration polls the queue once, invokes the function for every message
concurrently, waits for the whole batch, deletes the messages whose invocation
succeeded (when the mapping asks for it) and notifies the completion observer
once per message. The loop ends when the run limit is reached, or never for an
unbounded mapping.
"""

import asyncio
import inspect
import logging

from lambda_bridge.dispatch import acknowledge, dispatch
from lambda_bridge.errors import DeleteError, ObserverError
from lambda_bridge.invoke_base import InvokeBase
from lambda_bridge.mapping_model_dto import Mapping, QueueMessage
from lambda_bridge.persist_base import PersistBase
from lambda_bridge.settle import Settlement, settle_all

logger = logging.getLogger(__name__)

RECEIVE_FAILURE_PAUSE = 1.0


class ReactorState:
    """Iteration counter and run limit of one reactor; None means no limit."""

    def __init__(self, limit: int | None) -> None:
        self.iteration = 0
        self.limit = limit

    @property
    def done(self) -> bool:
        return self.limit is not None and self.iteration >= self.limit

    def advance(self) -> None:
        self.iteration += 1

    def __repr__(self) -> str:
        return f"ReactorState(iteration={self.iteration}, limit={self.limit})"


class Reactor:
    """Drains one queue into one function until its run limit is exhausted.

    The reactor owns its state; the only objects it shares with other reactors
    are the queue and invocation clients.
    """

    def __init__(self, mapping: Mapping, queue_client: PersistBase, invoker: InvokeBase) -> None:
        self.mapping = mapping
        self.queue_client = queue_client
        self.invoker = invoker
        self.state = ReactorState(mapping.number_of_runs)

    async def run(self) -> None:
        """Loop until done. Message level failures never stop the loop."""
        logger.debug(
            "Creating reactor %s -> %s (runs=%s)",
            self.mapping.queue_url,
            self.mapping.function_name,
            "unbounded" if self.mapping.unbounded else self.mapping.number_of_runs,
        )
        while not self.state.done:
            settlements = await self.run_once()
            await self.report(settlements)
            self.state.advance()
            # yield even when the poll and the batch never suspended
            await asyncio.sleep(0)
        logger.info(
            "Reactor %s -> %s finished after %d run(s)",
            self.mapping.queue_url,
            self.mapping.function_name,
            self.state.iteration,
        )

    async def run_once(self) -> list[Settlement]:
        """Poll once, dispatch the batch and settle it. Returns one Settlement per message."""
        messages = await self.poll()
        if not messages:
            return []
        settlements = await settle_all(dispatch(message, self.mapping, self.invoker) for message in messages)
        if self.mapping.delete_message:
            settlements = await settle_all(
                self._acknowledge(message, settlement) for message, settlement in zip(messages, settlements)
            )
        return settlements

    async def poll(self) -> list[QueueMessage]:
        """Receive the next batch; a failed receive is logged and yields an empty batch."""
        try:
            return await self.queue_client.receive_messages(
                self.mapping.queue_url,
                self.mapping.max_number_of_messages,
                self.mapping.wait_time_seconds,
                self.mapping.visibility_timeout,
            )
        except Exception as err:
            logger.warning("Polling %s failed: %s", self.mapping.queue_url, err)
            # a failed receive returns at once; pause at least RECEIVE_FAILURE_PAUSE before polling again
            await asyncio.sleep(max(self.mapping.wait_time_seconds, RECEIVE_FAILURE_PAUSE))
            return []

    async def _acknowledge(self, message: QueueMessage, settlement: Settlement) -> Settlement:
        if settlement.rejected:
            return settlement
        try:
            await acknowledge(message, self.queue_client)
        except DeleteError as err:
            err.invocation_result = settlement.value
            return Settlement.failure(err)
        return settlement

    async def report(self, settlements: list[Settlement]) -> None:
        """Call the completion observer once per settlement, in batch order.

        Observer exceptions are logged and discarded.
        """
        for settlement in settlements:
            if settlement.fulfilled:
                args = (None, settlement.value)
            else:
                args = (settlement.reason, None)
            try:
                result = self.mapping.on_completion(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as err:
                error = ObserverError(f"Completion observer for {self.mapping.function_name} raised: {err!r}")
                logger.warning("%s", error, exc_info=err)
