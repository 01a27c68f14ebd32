"""Error types and user-facing error messages."""

from typing import Any, Optional

GENERIC_ERROR_MESSAGE = (
    "An unexpected error occurred while running the security audit."
)


class AuditEngineError(Exception):
    """Raised when a call to the audit engine fails."""

    def __init__(
        self,
        message: str,
        body: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.body = body
        self.status_code = status_code


class ExportFailed(Exception):
    """Raised when the engine reports an unsuccessful export."""

    pass


class InvalidTrendWindow(ValueError):
    pass


def _message_of(container: Any) -> Optional[str]:
    if container is None:
        return None
    if isinstance(container, dict):
        value = container.get("message")
    else:
        value = getattr(container, "message", None)
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_error_message(error: Any) -> str:
    """
    Best-effort human readable message for an error.

    Checks the nested body message first, then the error's own message,
    then the exception arguments, falling back to a generic text.
    """
    if error is None:
        return ""

    nested = _message_of(getattr(error, "body", None))
    if nested:
        return nested

    if isinstance(error, dict):
        nested = _message_of(error.get("body"))
        if nested:
            return nested

    direct = _message_of(error)
    if direct:
        return direct

    if isinstance(error, BaseException) and error.args:
        text = str(error.args[0])
        if text.strip():
            return text

    return GENERIC_ERROR_MESSAGE
