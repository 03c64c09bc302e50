"""Create-or-update file access for Google Drive."""
from drivefiles.services.drive import DriveFile, DriveFilesService
from drivefiles.services.drive.exceptions import DriveError, DriveNotFoundError, DriveSearchError

__all__ = ["DriveFile", "DriveFilesService", "DriveError", "DriveNotFoundError", "DriveSearchError"]
