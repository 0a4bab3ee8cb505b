"""
Errors raised while dispatching a Gigapipe tool call.

Every failure of the request pipeline is a GigapipeError. The message of each
subclass is what the calling agent sees, so it names the missing field, the
HTTP status or the underlying cause.
"""


class GigapipeError(Exception):
    """Base class for tool call failures."""


class ValidationError(GigapipeError):
    """A required tool argument is missing. Raised before any network call."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f'required argument "{field}" not found')


class UnknownOperationError(GigapipeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class TransportError(GigapipeError):
    """Connection, DNS or timeout failure. No response data is available."""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"failed to make request: {cause}")


class UpstreamError(GigapipeError):
    """The backend answered with a status other than 200."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"request failed with status {status}")


class DecodeError(GigapipeError):
    """The backend body is not a JSON object."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"failed to decode response: {reason}")
