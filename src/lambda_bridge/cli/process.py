"""Drain one or more SQS queues into Lambda functions.

This module provides a CLI that builds queue/function mappings from a JSON
file or from paired --queue-url/--function-name options, optionally loads a
message formatter, and runs a reactor per mapping until its run limit is
reached. Every invocation outcome is echoed as it settles.
"""

import asyncio
import importlib
import json
import logging
import os
import sys
from typing import Any, Callable

import click
import dotenv

from config import get_settings
from lambda_bridge.errors import ConfigurationError
from lambda_bridge.invoke_lambda import InvokeLambda
from lambda_bridge.mapping_model_dto import validate_mappings
from lambda_bridge.orchestrator import Orchestrator
from lambda_bridge.persist_sqs import PersistSQS


def get_formatter(target: str, formatters_path: list[str] = []) -> Callable[[dict], Any]:
    """Load a message formatter given as "module:callable".

    Args:
        target: Import path of the formatter, e.g. "formatters.bodies:to_json".
        formatters_path: Extra directories to search for the module.
    Returns:
        The formatter callable.

    Raises:
        click.ClickException: If the target is malformed, the module cannot be
            imported, or the attribute is not callable.
    """
    for path in formatters_path:
        if os.path.exists(path) and path not in sys.path:
            sys.path.append(path)
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise click.ClickException(f"Formatter must look like module:callable, got {target}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as err:
        raise click.ClickException(f"Cannot import formatter module {module_name}: {err}") from err
    formatter = getattr(module, attribute, None)
    if not callable(formatter):
        raise click.ClickException(f"Formatter {target} is not callable")
    return formatter


def load_mapping_file(path: str) -> list[dict]:
    """Read a JSON list of mapping descriptors."""
    try:
        with open(path, encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as err:
        raise click.ClickException(f"Cannot read mapping file {path}: {err}") from err


def build_mappings(
    queue_urls: list[str],
    function_names: list[str],
    mapping_file: str | None,
    options: dict[str, Any],
) -> list[dict]:
    """Combine file and option descriptors; options given on the command line override the file."""
    if len(queue_urls) != len(function_names):
        raise click.ClickException("--queue-url and --function-name must be given the same number of times")
    descriptors = load_mapping_file(mapping_file) if mapping_file else []
    if not isinstance(descriptors, list):
        raise click.ClickException(f"Mapping file {mapping_file} must contain a JSON list")
    descriptors = descriptors + [
        {"queue_url": queue_url, "function_name": function_name}
        for queue_url, function_name in zip(queue_urls, function_names)
    ]
    defaults = {key: value for key, value in options.items() if value is not None}
    return [{**descriptor, **defaults} if isinstance(descriptor, dict) else descriptor for descriptor in descriptors]


def echo_outcome(error: BaseException | None, value: Any) -> None:
    """Completion observer printing one line per settled message."""
    if error is not None:
        click.secho(f"Invocation failed: {error}", err=True, color=True, fg="red")
        return
    status = value.get("StatusCode") if isinstance(value, dict) else value
    click.secho(f"Invocation accepted: {status}", color=True, fg="green")


@click.command()
@click.option("--mapping-file", type=str, required=False, help="JSON file with a list of mapping objects")
@click.option(
    "--queue-url",
    "queue_urls",
    type=str,
    multiple=True,
    help="URL of a queue to drain, can be used multiple times (pair with --function-name)",
)
@click.option(
    "--function-name",
    "function_names",
    type=str,
    multiple=True,
    help="Function to invoke for the queue at the same position, can be used multiple times",
)
@click.option("--max-messages", type=int, default=None, help="Maximum number of messages per poll (1-10)")
@click.option("--wait-time-seconds", type=int, default=None, help="Long polling wait time in seconds (0-20)")
@click.option(
    "--visibility-timeout",
    type=int,
    default=None,
    help="Visibility timeout in seconds for received messages",
)
@click.option(
    "--number-of-runs",
    type=int,
    default=None,
    help="Number of polls per queue before stopping, default is to run forever",
)
@click.option(
    "--delete-messages",
    is_flag=True,
    default=False,
    help="Delete messages once their invocation was accepted",
)
@click.option("--formatter", type=str, required=False, help="Message formatter as module:callable")
@click.option(
    "--formatters-path",
    type=str,
    multiple=True,
    help="A directory to search for the formatter module, multiple allowed",
)
@click.option("--region", type=str, required=False, help="AWS region, defaults to SQS_LAMBDA_AWS_REGION")
@click.option("--log-level", type=str, required=False, help="Logging level, defaults to SQS_LAMBDA_LOG_LEVEL")
def main(**kwargs: Any) -> None:
    """Poll the mapped queues and invoke the mapped functions.

    Each poll fetches a batch, invokes the function for every message
    concurrently with InvocationType=Event, and optionally deletes the
    messages whose invocation was accepted. Failed invocations are reported
    and left on the queue; they reappear after the visibility timeout.
    """
    if os.path.exists(".env"):
        dotenv.load_dotenv()
    settings = get_settings()
    if kwargs["region"]:
        settings.aws_region = kwargs["region"]
    logging.basicConfig(level=(kwargs["log_level"] or settings.log_level).upper())

    options = {
        "max_number_of_messages": kwargs["max_messages"],
        "wait_time_seconds": kwargs["wait_time_seconds"],
        "visibility_timeout": kwargs["visibility_timeout"],
        "number_of_runs": kwargs["number_of_runs"],
        "delete_message": kwargs["delete_messages"] or None,
        "on_completion": echo_outcome,
    }
    if kwargs["formatter"]:
        options["message_formatter"] = get_formatter(kwargs["formatter"], list(kwargs["formatters_path"]))

    descriptors = build_mappings(
        list(kwargs["queue_urls"]),
        list(kwargs["function_names"]),
        kwargs["mapping_file"],
        options,
    )
    try:
        mappings = validate_mappings(descriptors)
    except ConfigurationError as err:
        raise click.ClickException(str(err)) from err

    queue_client = PersistSQS(settings)
    try:
        invoker = InvokeLambda(settings)
        try:
            asyncio.run(Orchestrator(queue_client, invoker).run_validated(mappings))
        except KeyboardInterrupt:
            click.echo("Stopped")
        finally:
            invoker.close()
    finally:
        queue_client.close()


if __name__ == "__main__":
    main()
