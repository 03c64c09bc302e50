"""Exception hierarchy for Google Drive file operations."""


class DriveError(Exception):
    """Base exception for Drive file operations.

    Carries the transport error that caused it, when there is one.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class DriveNotConfiguredError(DriveError):
    """Drive service was built without credentials."""


class DriveSearchError(DriveError):
    """Search query failed.

    Files collected from pages fetched before the failure are kept in
    ``files`` so callers can use them as best-effort results.
    """

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        files: list | None = None,
    ):
        super().__init__(message, original_error)
        self.files = files if files is not None else []


class DriveNotFoundError(DriveError):
    """Requested file or folder does not exist."""


class DriveCreateError(DriveError):
    """Failed to create a file or folder."""


class DriveUpdateError(DriveError):
    """Failed to update a file."""


class DriveExportError(DriveError):
    """Failed to export a native document."""


class DriveDownloadError(DriveError):
    """Failed to download file content."""


class DriveDeleteError(DriveError):
    """Failed to delete a file."""


class DriveReadError(DriveError):
    """Failed while reading a download stream."""


__all__ = [
    "DriveCreateError",
    "DriveDeleteError",
    "DriveDownloadError",
    "DriveError",
    "DriveExportError",
    "DriveNotConfiguredError",
    "DriveNotFoundError",
    "DriveReadError",
    "DriveSearchError",
    "DriveUpdateError",
]
