"""Error taxonomy shared by the domain, the store and the HTTP layer.

Every error is terminal for the current request. public_message is what the
end user sees; internal detail goes to the logs via exception chaining.
"""

from __future__ import annotations


class ProposelyError(Exception):
    """Base class for all expected failures."""

    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, public_message: str | None = None) -> None:
        self.public_message = public_message or self.default_message
        super().__init__(self.public_message)


class ValidationError(ProposelyError):
    """Malformed or missing required input."""

    status_code = 400
    default_message = "Invalid request."


class NotFoundError(ProposelyError):
    """No matching proposal or share slug."""

    status_code = 404
    default_message = "Proposal not found."


class ConfigurationError(ProposelyError):
    """Missing credentials or mode mismatch detected before any I/O."""

    status_code = 500
    default_message = "Server configuration error."


class UpstreamError(ProposelyError):
    """Store or notifier collaborator failed or timed out."""

    status_code = 502
    default_message = "A downstream service failed. Please try again."


class OperationUnavailableError(ProposelyError):
    """Operation is disabled in the current mode."""

    status_code = 403
    default_message = "This operation is not available."
