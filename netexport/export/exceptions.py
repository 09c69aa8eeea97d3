"""Export workflow domain exceptions."""

from typing import Optional


class ExportException(Exception):
    """Base exception for export operations."""

    def __init__(self, message: str, correlation_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class CommentsRequiredError(ExportException):
    """The user comments were empty when a save was requested."""

    def __init__(self, message: str = 'Please fill in the text field!', correlation_id: Optional[str] = None):
        super().__init__(message, correlation_id)


class DumpBuildError(ExportException):
    """The dump builder could not produce dump text."""

    pass


class ResourceCreationError(ExportException):
    """The download sink could not turn dump text into a handle."""

    pass
