"""Google Drive service for name-addressed file access."""
from drivefiles.services.drive.client import DriveFilesService
from drivefiles.services.drive.models import DriveFile
from drivefiles.services.drive.store import GoogleDriveStore, RemoteStore, UploadMedia

__all__ = ["DriveFilesService", "DriveFile", "GoogleDriveStore", "RemoteStore", "UploadMedia"]
