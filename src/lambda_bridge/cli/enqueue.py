"""Enqueue a message to a queue.

CLI that sends a JSON message to an SQS queue, handy for feeding a running
bridge by hand.
"""

import asyncio
import json
import os

import click
import dotenv

from config import get_settings
from lambda_bridge.persist_sqs import PersistSQS as QueueRepository


@click.command()
@click.option(
    "--queue-url",
    type=str,
    required=True,
    help="The URL of the queue to enqueue the message to",
)
@click.option("--message", type=str, required=True, help="The message to enqueue (JSON)")
@click.option("--region", type=str, required=False, help="AWS region, defaults to SQS_LAMBDA_AWS_REGION")
def main(queue_url: str, message: str, region: str) -> None:
    """Enqueue a JSON message to the specified queue."""
    click.echo(f"queue-url: {queue_url}")
    click.echo(f"message: {message}")
    try:
        json.loads(message)
    except json.JSONDecodeError as err:
        raise click.ClickException(f"Invalid JSON: {message}") from err

    if os.path.exists(".env"):
        dotenv.load_dotenv()
    settings = get_settings()
    if region:
        settings.aws_region = region

    queue_repo = QueueRepository(settings)
    try:
        message_id = asyncio.run(queue_repo.send_message(queue_url, message))
        click.echo(f"Message enqueued with ID: {message_id}")
    except Exception as e:
        raise click.ClickException(f"Error: {e}") from e
    finally:
        queue_repo.close()


if __name__ == "__main__":
    """Entry point for the enqueue CLI."""
    main()
