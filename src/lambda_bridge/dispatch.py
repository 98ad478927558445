"""Invoke the mapped function for one message, and acknowledge it afterwards.

dispatch never raises: every failure becomes a rejected Settlement so one bad
message cannot disturb the rest of its batch.
"""

import json
import logging

from lambda_bridge.errors import DeleteError, DispatchError
from lambda_bridge.invoke_base import InvokeBase
from lambda_bridge.mapping_model_dto import Mapping, QueueMessage
from lambda_bridge.persist_base import PersistBase
from lambda_bridge.settle import Settlement

logger = logging.getLogger(__name__)


def build_payload(message: QueueMessage, mapping: Mapping) -> bytes:
    """Format a copy of the message record and serialize it to JSON bytes."""
    formatted = mapping.message_formatter(dict(message.raw))
    return json.dumps(formatted).encode("utf-8")


async def _invoke(message: QueueMessage, mapping: Mapping, invoker: InvokeBase) -> dict:
    try:
        payload = build_payload(message, mapping)
    except Exception as err:
        raise DispatchError(f"Could not format message {message.message_id}: {err}", mapping.function_name) from err
    try:
        return await invoker.invoke_async(mapping.function_name, payload)
    except Exception as err:
        raise DispatchError(f"Invoking {mapping.function_name} failed: {err}", mapping.function_name) from err


async def dispatch(message: QueueMessage, mapping: Mapping, invoker: InvokeBase) -> Settlement:
    """Invoke mapping.function_name with the formatted message.

    Returns a fulfilled Settlement holding the service acknowledgment, or a
    rejected one holding a DispatchError chained to the cause.
    """
    logger.debug("Incoming message %s from %s", message.message_id, message.queue_url)
    try:
        response = await _invoke(message, mapping, invoker)
    except DispatchError as err:
        return Settlement.failure(err)
    return Settlement.success(response)


async def acknowledge(message: QueueMessage, queue_client: PersistBase) -> None:
    """Delete the message from the queue it was received from.

    Raises:
        DeleteError: If the message has no receipt handle or the delete call fails.
    """
    if not message.receipt_handle:
        raise DeleteError(f"Message {message.message_id} has no receipt handle", message.queue_url)
    try:
        await queue_client.delete_message(message.queue_url, message.receipt_handle)
    except Exception as err:
        raise DeleteError(
            f"Could not delete message {message.message_id} from {message.queue_url}: {err}",
            message.queue_url,
        ) from err
