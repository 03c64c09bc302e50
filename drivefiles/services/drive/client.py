"""Name-addressed Google Drive file service.

Files are looked up by name within a parent folder and either created or
updated in place. ``.csv`` files are converted to Google Sheets on upload,
and Google Workspace documents are exported to a text format on download.
"""
import io
import json
import logging
from contextlib import closing
from pathlib import Path
from typing import Any, BinaryIO

from google.oauth2 import service_account
from googleapiclient.discovery import build

from drivefiles.core.config import Settings, settings as default_settings
from drivefiles.services.drive.exceptions import (
    DriveNotConfiguredError,
    DriveReadError,
    DriveSearchError,
)
from drivefiles.services.drive.mime import (
    FOLDER_MIME_TYPE,
    SPREADSHEET_MIME_TYPE,
    ContentTypeResolver,
    ExportFormatResolver,
    is_csv,
    is_native_document,
)
from drivefiles.services.drive.models import DriveFile
from drivefiles.services.drive.query import build_name_query
from drivefiles.services.drive.store import GoogleDriveStore, RemoteStore, UploadMedia

logger = logging.getLogger(__name__)

CSV_SUFFIX = ".csv"
DOWNLOAD_FIELDS = "id, name, mimeType"

Content = BinaryIO | bytes


class DriveFilesService:
    """Create, update, find and download Drive files by name."""

    def __init__(
        self,
        store: RemoteStore | None,
        content_types: ContentTypeResolver | None = None,
        export_formats: ExportFormatResolver | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the service.

        Args:
            store: Remote store to operate on. If None, every operation
                raises DriveNotConfiguredError.
            content_types: Extension to upload content type resolver.
            export_formats: Native document export format resolver.
            settings: Request settings; defaults to the module settings.
        """
        self.store = store
        self.content_types = content_types or ContentTypeResolver()
        self.export_formats = export_formats or ExportFormatResolver()
        self.settings = settings or default_settings

    @classmethod
    def from_credentials(
        cls, credentials_json: str | None, settings: Settings | None = None
    ) -> "DriveFilesService":
        """Build a service authenticated with a service account.

        Args:
            credentials_json: JSON string or file path to service account
                credentials. If None, the service is not configured.
            settings: Request settings; defaults to the module settings.
        """
        settings = settings or default_settings

        if credentials_json is None:
            logger.warning("Google Drive service not configured (no credentials provided)")
            return cls(None, settings=settings)

        try:
            credentials_info = cls._load_credentials(credentials_json)
            credentials = service_account.Credentials.from_service_account_info(
                credentials_info,
                scopes=settings.drive_scopes
            )
            resource = build('drive', 'v3', credentials=credentials)
            logger.info("Google Drive service initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Google Drive service: {e}")
            raise

        return cls.from_resource(resource, settings=settings)

    @classmethod
    def from_resource(cls, resource: Any, settings: Settings | None = None) -> "DriveFilesService":
        """Wrap an existing Drive v3 API resource."""
        settings = settings or default_settings
        return cls(GoogleDriveStore(resource, settings), settings=settings)

    def with_resource(self, resource: Any) -> None:
        """Replace the underlying store with one wrapping ``resource``."""
        self.store = GoogleDriveStore(resource, self.settings)

    @staticmethod
    def _load_credentials(credentials_json: str) -> dict[str, Any]:
        """Load credentials from JSON string or file path."""
        try:
            return json.loads(credentials_json)
        except json.JSONDecodeError:
            path = Path(credentials_json)
            if path.exists():
                with open(path, 'r') as f:
                    return json.load(f)
            else:
                raise ValueError(f"Invalid credentials: not valid JSON and file not found at {path}")

    def _require_store(self) -> RemoteStore:
        if self.store is None:
            logger.warning("Drive service not configured")
            raise DriveNotConfiguredError("Drive service not configured")
        return self.store

    # Lookup

    def search(self, query: str) -> list[DriveFile]:
        """Search all files visible to the authenticated user.

        Args:
            query: Drive search expression.

        Returns:
            Every matching file; empty when nothing matches.

        Raises:
            DriveSearchError: With the files found before the failure.
        """
        store = self._require_store()
        try:
            resources = store.search(query, self.settings.drive_search_fields)
        except DriveSearchError as e:
            e.files = [DriveFile.from_api(f) for f in e.files]
            raise
        return [DriveFile.from_api(f) for f in resources]

    def files_named(self, name: str, parent_id: str = "") -> list[DriveFile]:
        """Return all files named ``name`` in folder ``parent_id``.

        An empty ``parent_id`` searches every file visible to the user.
        """
        return self.search(build_name_query(name, parent_id))

    def find_existing(self, name: str, parent_id: str = "") -> list[DriveFile]:
        """Find files an upload of ``name`` should replace.

        Drive strips the .csv extension when converting an upload to a
        spreadsheet, so a CSV name with no exact match is retried without it.
        """
        files = self.files_named(name, parent_id)
        if not files and name.endswith(CSV_SUFFIX):
            stripped = name[:-len(CSV_SUFFIX)]
            logger.debug(f"No file named {name}, retrying as {stripped}")
            files = self.files_named(stripped, parent_id)
        return files

    # Create / update

    def create_folder(self, name: str, parent_id: str = "") -> DriveFile:
        """Create a folder named ``name`` in ``parent_id`` (root if empty).

        Existing folders with the same name are left alone.
        """
        store = self._require_store()
        created = store.create({
            "name": name,
            "mimeType": FOLDER_MIME_TYPE,
            "parents": [parent_id],
        })
        logger.info(f"Created folder {name} ({created.get('id')})")
        return DriveFile.from_api(created)

    def create_file(self, name: str, parent_id: str = "", content: Content | None = None) -> DriveFile:
        """Create a file named ``name`` in ``parent_id`` (root if empty).

        CSV content is converted to a Google Sheets document by Drive. With
        no content an empty file is created. Existing files with the same
        name are left alone.
        """
        store = self._require_store()
        content_type = self.content_types.for_name(name)

        metadata: dict[str, Any] = {"name": name, "parents": [parent_id]}
        if is_csv(content_type):
            metadata["mimeType"] = SPREADSHEET_MIME_TYPE

        created = store.create(metadata, self._media(content, content_type))
        logger.info(f"Created file {name} ({created.get('id')})")
        return DriveFile.from_api(created)

    def update_file(self, file_id: str, name: str, content: Content | None = None) -> DriveFile:
        """Replace the contents of file ``file_id``.

        ``name`` selects the upload content type from its extension; the
        file keeps its current name.
        """
        store = self._require_store()
        media = self._media(content, self.content_types.for_name(name))
        updated = store.update(file_id, {}, media)
        logger.info(f"Updated file {file_id}")
        return DriveFile.from_api(updated)

    def create_or_update_file(
        self, name: str, parent_id: str = "", content: Content | None = None
    ) -> DriveFile:
        """Replace the contents of the file named ``name`` in ``parent_id``,
        creating it if it does not exist.

        When several files match, the first one Drive lists is updated.
        """
        files = self.find_existing(name, parent_id)
        if files:
            if len(files) > 1:
                logger.debug(f"{len(files)} files named {name}, updating {files[0].id}")
            return self.update_file(files[0].id, name, content)
        return self.create_file(name, parent_id, content)

    # Read

    def get_info(self, file_id: str) -> DriveFile:
        """Return all metadata for file ``file_id``."""
        store = self._require_store()
        return DriveFile.from_api(store.get(file_id, self.settings.drive_info_fields))

    def download_file(self, file_id: str) -> BinaryIO:
        """Open a stream of the contents of file ``file_id``.

        Google Workspace documents are exported as text. The caller owns
        the returned stream and must close it.
        """
        store = self._require_store()
        file = DriveFile.from_api(store.get(file_id, DOWNLOAD_FIELDS))

        if is_native_document(file.mime_type):
            export_mime = self.export_formats.export_type(file.mime_type)
            logger.debug(f"Exporting {file_id} ({file.mime_type}) as {export_mime}")
            return store.export(file_id, export_mime)
        return store.download(file_id)

    def file_contents(self, file_id: str) -> bytes:
        """Download and return the contents of file ``file_id``."""
        with closing(self.download_file(file_id)) as stream:
            try:
                return stream.read()
            except OSError as e:
                logger.error(f"Error reading file {file_id}: {e}")
                raise DriveReadError(f"Failed reading file {file_id}: {e}", e) from e

    def delete_file(self, file_id: str) -> None:
        """Delete file ``file_id``."""
        store = self._require_store()
        store.delete(file_id)
        logger.info(f"Deleted file {file_id}")

    def _media(self, content: Content | None, content_type: str) -> UploadMedia | None:
        if content is None:
            return None
        if isinstance(content, bytes):
            content = io.BytesIO(content)
        return UploadMedia(content, content_type)
