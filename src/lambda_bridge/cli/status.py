"""Show the status of a queue.

CLI that prints the approximate message counts for a given queue URL.
"""

import asyncio
import os

import click
import dotenv
from icecream import ic

from config import get_settings
from lambda_bridge.persist_sqs import PersistSQS as QueueRepository


@click.command()
@click.option("--queue-url", type=str, required=True, help="The URL of the queue to show the status of")
@click.option("--region", type=str, required=False, help="AWS region, defaults to SQS_LAMBDA_AWS_REGION")
def main(queue_url: str, region: str) -> None:
    """Print metrics for the specified queue (visible, in flight, delayed)."""
    click.echo("Queue status")

    if os.path.exists(".env"):
        dotenv.load_dotenv()
    settings = get_settings()
    if region:
        settings.aws_region = region

    queue_repo = QueueRepository(settings)
    try:
        metrics = asyncio.run(queue_repo.metrics(queue_url))
    except Exception as e:
        raise click.ClickException(f"Cannot read queue {queue_url}: {e}") from e
    finally:
        queue_repo.close()
    ic(metrics)


if __name__ == "__main__":
    main()
