"""Ready-made message formatters for the process CLI.

A formatter receives a copy of the SQS message record and returns the
JSON-serializable payload sent to the function. Pass one with
--formatter lambda_bridge.formatters:<name>.
"""

import json
from typing import Any


def body(message: dict) -> Any:
    """Send only the raw message body."""
    return message.get("Body")


def json_body(message: dict) -> Any:
    """Send the message body parsed as JSON; raises ValueError for other bodies."""
    raw = message.get("Body")
    if raw is None:
        raise ValueError(f"Message {message.get('MessageId')} has no body")
    return json.loads(raw)


def envelope(message: dict) -> dict:
    """Send id, body and attributes without the receipt handle."""
    return {
        "MessageId": message.get("MessageId"),
        "Body": message.get("Body"),
        "Attributes": message.get("Attributes", {}),
        "MessageAttributes": message.get("MessageAttributes", {}),
    }
