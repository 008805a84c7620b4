"""Session error kinds.

Every session operation converts these into a single human-readable message
at its own task boundary; none of them escape to the caller.
"""


class SessionError(Exception):
    """Base class for failures reported through the session error slot."""

    message = "Operation failed"

    def __str__(self) -> str:
        return self.message


class NoResourceSelected(SessionError):
    message = "Please select a file first"


class EmptyQuery(SessionError):
    message = "Please enter a search keyword"


class EmptyContentOnSave(SessionError):
    message = "File content is empty"


class IOFailure(SessionError):
    """Wraps an exception raised by a line source, write sink or store."""

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(operation, cause)
        self.operation = operation
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.operation} failed: {self.cause}"
