from coursetrack.core.config import UNKNOWN_ERROR_MESSAGE


class Unauthorized(Exception):
    """Raised when an operation is called without an authenticated caller."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
        self.message = message


class OperationFailed(Exception):
    """Any other failure of a service operation, query-layer errors included."""

    def __init__(self, message: str | None = None):
        message = message or UNKNOWN_ERROR_MESSAGE
        super().__init__(message)
        self.message = message

    @classmethod
    def wrap(cls, exc: Exception) -> "OperationFailed":
        return cls(str(exc))
