"""Custom exceptions for the answer oracle, its client and the quiz session."""
from typing import Optional


class InvalidQuestionId(ValueError):
    """Question id is missing, not a positive integer, or not in the answer key."""
    pass


# --- Oracle client ---
class OracleError(Exception):
    """Base exception for failed answer lookups."""
    pass


class OracleUnavailable(OracleError):
    """Network connectivity issues."""
    pass


class OracleTimeout(OracleUnavailable):
    """No response within the configured timeout."""
    pass


class OracleRejected(OracleError):
    """Oracle answered with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Oracle returned {status_code}: {message or 'no message'}")


class MalformedResponse(OracleError):
    """Oracle returned an unexpected response format."""
    pass


# --- Quiz session ---
class SessionError(Exception):
    """Event not allowed in the current session state."""
    pass


class SubmissionPending(SessionError):
    """An answer lookup is already in flight."""
    pass


class AlreadyAnswered(SessionError):
    """A record already exists for this question."""
    pass


class InvalidTransition(SessionError):
    """Event does not apply to the current phase or arguments are out of range."""
    pass
