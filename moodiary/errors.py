"""Exceptions raised by Moodiary."""


class DiaryError(Exception):
    """Base class for all Moodiary errors."""


class ValidationError(DiaryError, ValueError):
    """One or more entry fields violate a rule.

    Attributes:
        errors: Every failing message, in rule order.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


class NotFoundError(DiaryError, LookupError):
    """A referenced entry or user profile does not exist."""


class PermissionDeniedError(DiaryError, PermissionError):
    """The entry exists but belongs to a different user."""


class TransactionConflictError(DiaryError):
    """A document read by a transaction changed before it could commit.

    Retryable: the caller may run the operation again.
    """


class UploadError(DiaryError, ValueError):
    """A file upload was rejected."""
