"""
Error taxonomy for the generation pipeline and the target database.

Every failure is scoped to a single request. Generation-path errors abort the
turn and are mapped to HTTP statuses by the API layer; auxiliary-path errors
are absorbed where they occur. Connector errors come from the target database:
an ``ExecutionError`` is what the auto-fix turn feeds back to the model.
"""

from typing import Any


class AskDBError(Exception):
    """
    Base exception for pipeline errors.

    Attributes:
        message: Error description
        recoverable: Whether the caller can correct the request and retry
        context: Additional context for debugging
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        recoverable: bool = True,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        """Body returned to HTTP callers."""
        return {"error": self.message}


class EmptyRequest(AskDBError):
    """No resolvable, non-empty user utterance in the request."""

    status_code = 400

    def __init__(self, message: str = "Request has no user prompt to answer."):
        super().__init__(message, recoverable=True)


class QuotaExceeded(AskDBError):
    """The system-wide request quota for the current window is used up."""

    status_code = 429

    def __init__(self, current: int, limit: int):
        self.current = current
        self.limit = limit
        super().__init__(
            f"System-wide rate limit exceeded. Usage: {current}/{limit}. Try again later.",
            recoverable=True,
            context={"current": current, "limit": limit},
        )

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "current": self.current, "limit": self.limit}


class MissingCredential(AskDBError):
    """No model provider credential is configured (operator misconfiguration)."""

    status_code = 500

    def __init__(self, message: str = "Missing OpenAI key"):
        super().__init__(message, recoverable=False)


class UpstreamError(AskDBError):
    """The model provider failed or returned a non-OK response."""

    status_code = 500

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, recoverable=True, context=context)


class MalformedAuxiliaryOutput(ValueError):
    """Auxiliary model output (sample questions) could not be parsed."""


class ConnectorError(Exception):
    """Base exception for target database failures (introspection and execution)."""


class ConnectionError(ConnectorError):
    """Error establishing or managing the target database connection."""


class ExecutionError(ConnectorError):
    """Statement execution failed; the message is offered to the auto-fix turn."""


class SchemaError(ConnectorError):
    """Error introspecting the target database schema."""
