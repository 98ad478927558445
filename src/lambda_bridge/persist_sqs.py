"""Amazon SQS backed queue access using boto3.

The low-level boto3 client is blocking; each call runs in a worker thread so
the reactors keep sharing one event loop.
"""

import asyncio
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from config import Settings, get_settings
from lambda_bridge.errors import ReceiveError
from lambda_bridge.mapping_model_dto import QueueMessage
from lambda_bridge.persist_base import PersistBase

QUEUE_ATTRIBUTES = [
    "ApproximateNumberOfMessages",
    "ApproximateNumberOfMessagesNotVisible",
    "ApproximateNumberOfMessagesDelayed",
    "VisibilityTimeout",
]


class PersistSQS(PersistBase):
    """Queue access implementation for Amazon SQS.

    Wraps receive_message, delete_message, send_message and
    get_queue_attributes. Retries are left to botocore's standard retry mode.
    """

    def __init__(self, settings: Settings | None = None, client=None) -> None:
        """Create the SQS client from settings unless one is given."""
        settings = settings or get_settings()
        self.client = client or boto3.client(
            "sqs",
            region_name=settings.aws_region,
            endpoint_url=settings.sqs_endpoint_url,
            config=Config(retries={"max_attempts": settings.max_attempts, "mode": "standard"}),
        )
        self.logger = logging.getLogger(__name__)

    async def receive_messages(
        self,
        queue_url: str,
        max_number_of_messages: int,
        wait_time_seconds: int,
        visibility_timeout: int | None = None,
    ) -> list[QueueMessage]:
        """Long-poll the queue once; never waits longer than wait_time_seconds."""
        kwargs = {
            "QueueUrl": queue_url,
            "MaxNumberOfMessages": max_number_of_messages,
            "WaitTimeSeconds": wait_time_seconds,
        }
        if visibility_timeout is not None:
            kwargs["VisibilityTimeout"] = visibility_timeout
        try:
            response = await asyncio.to_thread(self.client.receive_message, **kwargs)
        except (BotoCoreError, ClientError) as err:
            raise ReceiveError(f"Could not receive from {queue_url}: {err}") from err
        records = response.get("Messages") or []
        self.logger.debug("Received %d message(s) from %s", len(records), queue_url)
        return [QueueMessage(queue_url=queue_url, raw=record) for record in records]

    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Delete the message; botocore errors propagate to the caller."""
        await asyncio.to_thread(
            self.client.delete_message,
            QueueUrl=queue_url,
            ReceiptHandle=receipt_handle,
        )

    async def send_message(self, queue_url: str, body: str) -> str:
        """Send a message body to the queue. Returns the message ID."""
        response = await asyncio.to_thread(
            self.client.send_message,
            QueueUrl=queue_url,
            MessageBody=body,
        )
        return response["MessageId"]

    async def metrics(self, queue_url: str) -> dict:
        """Get the approximate message counts for the queue."""
        response = await asyncio.to_thread(
            self.client.get_queue_attributes,
            QueueUrl=queue_url,
            AttributeNames=QUEUE_ATTRIBUTES,
        )
        return response.get("Attributes", {})

    def close(self) -> None:
        """Close the client's connection pool."""
        self.client.close()
