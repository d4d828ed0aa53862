"""Exception hierarchy shared by the client, the registry and the tool handlers."""

from __future__ import annotations


class CmError(Exception):
    """Base class for all gateway errors."""


class ConfigError(CmError):
    """Required configuration is missing or malformed."""


class ValidationError(CmError):
    """A tool argument is missing, blank or does not match the tool schema."""


class StateError(CmError):
    """The client was used before the API version was resolved."""


class ProtocolError(CmError):
    """The version-discovery endpoint answered with something unexpected."""


class UpstreamError(CmError):
    """Cloudera Manager answered with a non-success HTTP status."""

    def __init__(
        self,
        operation: str,
        status_code: int,
        reason: str = "",
        body: str | None = None,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        self.reason = reason
        self.body = body
        msg = f"{operation} failed: {status_code} {reason}".rstrip()
        if body:
            msg += f" - {body}"
        super().__init__(msg)
