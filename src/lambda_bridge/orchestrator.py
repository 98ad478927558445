"""Run one reactor per mapping on a shared event loop.

The mappings are validated before anything else happens; a malformed mapping
raises ConfigurationError and no client is created, no queue is polled.
"""

import asyncio
import logging
from typing import Any

from lambda_bridge.errors import describe
from lambda_bridge.invoke_base import InvokeBase
from lambda_bridge.invoke_lambda import InvokeLambda
from lambda_bridge.mapping_model_dto import Mapping, validate_mappings
from lambda_bridge.persist_base import PersistBase
from lambda_bridge.persist_sqs import PersistSQS
from lambda_bridge.reactor import Reactor

logger = logging.getLogger(__name__)


class Orchestrator:
    """Starts a reactor for every mapping and waits for all of them.

    The queue and invocation clients are injected and shared by the reactors.
    """

    def __init__(self, queue_client: PersistBase, invoker: InvokeBase) -> None:
        self.queue_client = queue_client
        self.invoker = invoker

    def reactors(self, mappings: list[Mapping]) -> list[Reactor]:
        """Build one reactor per validated mapping."""
        return [Reactor(mapping, self.queue_client, self.invoker) for mapping in mappings]

    async def run(self, mappings: Any) -> None:
        """Validate mappings, then run every reactor concurrently until all are done.

        Never returns while any mapping is unbounded; cancel the awaiting task
        to stop every reactor.

        Raises:
            ConfigurationError: If mappings is not a non-empty list of valid descriptors.
        """
        logger.debug("Initializing with mapping %s", describe(mappings))
        validated = validate_mappings(mappings)
        await self.run_validated(validated)

    async def run_validated(self, mappings: list[Mapping]) -> None:
        tasks = [asyncio.create_task(reactor.run()) for reactor in self.reactors(mappings)]
        try:
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()


async def run(
    mappings: Any,
    queue_client: PersistBase | None = None,
    invoker: InvokeBase | None = None,
) -> None:
    """Drain every mapped queue into its function.

    Clients default to the boto3 backed SQS and Lambda implementations, built
    from the environment settings only after the mappings validated.
    """
    validated = validate_mappings(mappings)
    owned = []
    try:
        if queue_client is None:
            queue_client = PersistSQS()
            owned.append(queue_client)
        if invoker is None:
            invoker = InvokeLambda()
            owned.append(invoker)
        await Orchestrator(queue_client, invoker).run_validated(validated)
    finally:
        for client in owned:
            client.close()
