"""Error types raised by the bridge.

Only ConfigurationError ever escapes a run; the per-message errors end up as
rejected settlements handed to the completion observer.
"""

import json
from typing import Any


class BridgeError(Exception):
    """Base class for all bridge errors."""


class ConfigurationError(BridgeError):
    """The mapping configuration is malformed; nothing was started."""

    def __init__(self, message: str, mappings: Any = None) -> None:
        super().__init__(message)
        self.mappings = mappings


class DispatchError(BridgeError):
    """Formatting or invoking the target failed for one message."""

    def __init__(self, message: str, function_name: str | None = None) -> None:
        super().__init__(message)
        self.function_name = function_name


class DeleteError(BridgeError):
    """The invocation succeeded but the message could not be deleted from its queue."""

    def __init__(self, message: str, queue_url: str | None = None, invocation_result: Any = None) -> None:
        super().__init__(message)
        self.queue_url = queue_url
        self.invocation_result = invocation_result


class ReceiveError(BridgeError):
    """Polling a queue failed."""


class ObserverError(BridgeError):
    """A completion observer raised; logged and discarded."""


def describe(value: Any) -> str:
    """Render a configuration value for an error message, falling back to repr."""
    try:
        return json.dumps(value, default=repr)
    except (TypeError, ValueError):
        return repr(value)
