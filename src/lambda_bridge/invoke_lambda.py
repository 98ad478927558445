"""AWS Lambda invocation using boto3 with InvocationType=Event."""

import asyncio
import logging

import boto3
from botocore.config import Config

from config import Settings, get_settings
from lambda_bridge.invoke_base import InvokeBase


class InvokeLambda(InvokeBase):
    """Invokes Lambda functions asynchronously.

    The service answers 202 once the event is queued; the function runs later
    and its result is never seen here.
    """

    def __init__(self, settings: Settings | None = None, client=None) -> None:
        """Create the Lambda client from settings unless one is given."""
        settings = settings or get_settings()
        self.client = client or boto3.client(
            "lambda",
            region_name=settings.aws_region,
            endpoint_url=settings.lambda_endpoint_url,
            config=Config(retries={"max_attempts": settings.max_attempts, "mode": "standard"}),
        )
        self.logger = logging.getLogger(__name__)

    async def invoke_async(self, function_name: str, payload: bytes) -> dict:
        """Send one Event invocation. botocore errors propagate to the dispatcher."""
        self.logger.debug("Invoking lambda %s", function_name)
        response = await asyncio.to_thread(
            self.client.invoke,
            FunctionName=function_name,
            InvocationType="Event",
            Payload=payload,
        )
        # Event invocations carry an empty body; drop the stream so results stay plain data.
        response.pop("Payload", None)
        return response

    def close(self) -> None:
        """Close the client's connection pool."""
        self.client.close()
