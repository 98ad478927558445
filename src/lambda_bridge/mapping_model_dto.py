"""Mapping and message data transfer objects.

A mapping pairs one SQS queue with one Lambda function plus its polling and
reporting options. Descriptors may use snake_case keys or camelCase keys
(queueUrl, functionName, numberOfRuns, ...); both resolve to the same typed fields.
"""

import math
from typing import Any, Callable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from lambda_bridge.errors import ConfigurationError, describe

MAPPING_SHAPE = '{"queue_url": "https://sqs...", "function_name": "my-function"}'


def identity(message: dict) -> dict:
    """Default message formatter: the SQS record is the payload."""
    return message


def noop(error: BaseException | None, value: Any) -> None:
    """Default completion observer."""
    return None


class Mapping(BaseModel):
    """One queue/function pairing with its tuning parameters, immutable once validated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    queue_url: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("queue_url", "queueUrl", "QueueUrl"),
        description="URL of the queue to drain",
    )
    function_name: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("function_name", "functionName", "FunctionName"),
        description="Name or ARN of the function to invoke",
    )
    max_number_of_messages: int = Field(
        5,
        ge=1,
        le=10,
        validation_alias=AliasChoices("max_number_of_messages", "maxNumberOfMessages", "MaxNumberOfMessages"),
    )
    wait_time_seconds: int = Field(
        5,
        ge=0,
        le=20,
        validation_alias=AliasChoices("wait_time_seconds", "waitTimeSeconds", "WaitTimeSeconds"),
    )
    visibility_timeout: int | None = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("visibility_timeout", "visibilityTimeout", "VisibilityTimeout"),
    )
    message_formatter: Callable[[dict], Any] = Field(
        identity,
        validation_alias=AliasChoices("message_formatter", "messageFormatter", "MessageFormatter"),
    )
    number_of_runs: int | None = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("number_of_runs", "numberOfRuns", "NumberOfRuns"),
        description="Poll iterations before stopping; None runs forever",
    )
    delete_message: bool = Field(
        False,
        validation_alias=AliasChoices("delete_message", "deleteMessage", "DeleteMessage"),
    )
    on_completion: Callable[[BaseException | None, Any], Any] = Field(
        noop,
        validation_alias=AliasChoices("on_completion", "onCompletion", "onLambda", "OnLambda", "onLambdaComplete"),
    )

    @field_validator(
        "max_number_of_messages", "wait_time_seconds", "visibility_timeout", "number_of_runs", mode="before"
    )
    @classmethod
    def _no_bools(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be an integer, not a boolean")
        return value

    @field_validator("number_of_runs", mode="before")
    @classmethod
    def _infinite_runs(cls, value: Any) -> Any:
        if isinstance(value, float) and math.isinf(value) and value > 0:
            return None
        return value

    @property
    def unbounded(self) -> bool:
        return self.number_of_runs is None


class QueueMessage(BaseModel):
    """An SQS message record together with the queue it came from."""

    model_config = ConfigDict(frozen=True)

    queue_url: str = Field(..., description="Queue the message was received from")
    raw: dict = Field(..., description="Message record as returned by ReceiveMessage")

    @property
    def receipt_handle(self) -> str | None:
        return self.raw.get("ReceiptHandle")

    @property
    def message_id(self) -> str | None:
        return self.raw.get("MessageId")

    @property
    def body(self) -> str | None:
        return self.raw.get("Body")


def _shape_error(mappings: Any, detail: str = "") -> ConfigurationError:
    return ConfigurationError(
        f"Your sqs/lambda mapping must be a non-empty list of objects like {MAPPING_SHAPE}, "
        f"got {describe(mappings)}{detail}",
        mappings=mappings,
    )


def validate_mappings(mappings: Any) -> list[Mapping]:
    """Validate raw mapping descriptors and apply defaults.

    Args:
        mappings: A non-empty list (or tuple) of dicts or Mapping instances.
    Returns:
        The normalized mappings, in input order.

    Raises:
        ConfigurationError: If the input is not a non-empty sequence or any
            descriptor is malformed. Nothing is returned for the valid ones.
    """
    if not isinstance(mappings, (list, tuple)) or not mappings:
        raise _shape_error(mappings)

    normalized: list[Mapping] = []
    for descriptor in mappings:
        if isinstance(descriptor, Mapping):
            normalized.append(descriptor)
            continue
        if not isinstance(descriptor, dict):
            raise _shape_error(mappings)
        try:
            normalized.append(Mapping.model_validate(descriptor))
        except ValidationError as err:
            raise _shape_error(mappings, f": {err}") from err
    return normalized
