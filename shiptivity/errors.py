# shiptivity/errors.py
"""
Error hierarchy for client / swimlane operations.

Every error carries the short `message` and the `long_message` explaining
the defect, which is exactly the error object returned to API callers.
"""


class ShiptivityError(Exception):
    """Base class for all caller input errors."""

    def __init__(self, message: str, long_message: str = None):
        super().__init__(message)
        self.message = message
        self.long_message = long_message

    def to_dict(self) -> dict:
        return {"message": self.message, "long_message": self.long_message}

    def __str__(self):
        if self.long_message:
            return f"{self.message} {self.long_message}"
        return self.message


class InvalidIdError(ShiptivityError):
    """Raised when a client id is not an integer."""

    def __init__(self, message: str = "Invalid id provided.",
                 long_message: str = "Id can only be integer."):
        super().__init__(message, long_message)


class ClientNotFoundError(InvalidIdError):
    """Raised when no client exists with the given id."""

    def __init__(self, message: str = "Invalid id provided.",
                 long_message: str = "Cannot find client with that id."):
        super().__init__(message, long_message)


class InvalidStatusError(ShiptivityError):
    def __init__(self, message: str = "Invalid status provided.",
                 long_message: str = "Status can only be one of the following: [backlog | in-progress | complete]."):
        super().__init__(message, long_message)


class InvalidPriorityError(ShiptivityError):
    def __init__(self, message: str = "Invalid priority provided.",
                 long_message: str = "Priority can only be positive integer."):
        super().__init__(message, long_message)


class CorruptRecordError(Exception):
    """A stored client row breaks the model (e.g. unknown status); not a caller error."""

    def __init__(self, client_id: int, reason: str):
        super().__init__(f"Client {client_id} is stored with {reason}")
        self.client_id = client_id
