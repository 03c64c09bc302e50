"""Remote store access for Drive files.

``RemoteStore`` is the narrow set of operations the file service needs.
``GoogleDriveStore`` implements it over a googleapiclient Drive v3 resource
and owns pagination, upload media and chunked downloads.
"""
import io
import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Protocol

from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload, MediaIoBaseUpload

from drivefiles.core.config import Settings, settings as default_settings
from drivefiles.services.drive.exceptions import (
    DriveCreateError,
    DriveDeleteError,
    DriveDownloadError,
    DriveError,
    DriveExportError,
    DriveNotFoundError,
    DriveReadError,
    DriveSearchError,
    DriveUpdateError,
)

logger = logging.getLogger(__name__)

FALLBACK_UPLOAD_MIME_TYPE = "application/octet-stream"
RESULT_FIELDS = "id, name, mimeType, parents, shared"


@dataclass(frozen=True)
class UploadMedia:
    """File content to upload and the content type it is sent as."""
    content: BinaryIO
    mime_type: str


class DownloadStream(io.RawIOBase):
    """Readable stream pulling a Drive media request chunk by chunk.

    Only the current chunk is held in memory. Errors while fetching chunks
    are raised as ``DriveReadError``.
    """

    def __init__(self, request: Any, chunk_size: int, file_id: str = ""):
        super().__init__()
        self.file_id = file_id
        self._buffer = io.BytesIO()
        self._downloader = MediaIoBaseDownload(self._buffer, request, chunksize=chunk_size)
        self._pending = b""
        self._done = False

    def readable(self) -> bool:
        return True

    def fetch_chunk(self) -> None:
        """Fetch the next chunk from Drive into the pending buffer."""
        status, self._done = self._downloader.next_chunk()
        if status:
            logger.debug(f"Download progress for {self.file_id}: {int(status.progress() * 100)}%")
        self._pending += self._buffer.getvalue()
        self._buffer.seek(0)
        self._buffer.truncate()

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed download stream")
        while not self._pending and not self._done:
            try:
                self.fetch_chunk()
            except HttpError as e:
                logger.error(f"Error reading download stream for {self.file_id}: {e}")
                raise DriveReadError(f"Failed reading file {self.file_id}: {e}", e) from e
        size = min(len(b), len(self._pending))
        b[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._pending = b""
            self._buffer.close()
        super().close()


class RemoteStore(Protocol):
    """Operations the file service needs from the remote store."""

    def search(self, query: str, fields: str) -> list[dict[str, Any]]:
        ...

    def create(self, metadata: dict[str, Any], media: UploadMedia | None = None) -> dict[str, Any]:
        ...

    def update(
        self, file_id: str, metadata: dict[str, Any], media: UploadMedia | None = None
    ) -> dict[str, Any]:
        ...

    def get(self, file_id: str, fields: str) -> dict[str, Any]:
        ...

    def download(self, file_id: str) -> BinaryIO:
        ...

    def export(self, file_id: str, mime_type: str) -> BinaryIO:
        ...

    def delete(self, file_id: str) -> None:
        ...


def _is_not_found(error: HttpError) -> bool:
    return getattr(error.resp, "status", None) == 404


class GoogleDriveStore:
    """RemoteStore backed by a Google Drive v3 API resource."""

    def __init__(self, service: Any, settings: Settings | None = None):
        """Initialize the store.

        Args:
            service: Resource returned by ``build('drive', 'v3', ...)``.
            settings: Request settings; defaults to the module settings.
        """
        self.service = service
        self.settings = settings or default_settings

    @property
    def files_resource(self) -> Any:
        """The wrapped ``files()`` collection for direct API access."""
        return self.service.files()

    def search(self, query: str, fields: str) -> list[dict[str, Any]]:
        """Return every file matching ``query``, across all result pages.

        Raises:
            DriveSearchError: A page failed; ``files`` holds earlier pages.
        """
        all_files: list[dict[str, Any]] = []
        page_token = None
        logger.debug(f"Searching Drive: {query}")

        try:
            while True:
                results = self.files_resource.list(
                    q=query,
                    fields=f"nextPageToken, {fields}",
                    pageSize=self.settings.drive_page_size,
                    pageToken=page_token,
                    supportsAllDrives=self.settings.drive_supports_all_drives,
                    includeItemsFromAllDrives=self.settings.drive_supports_all_drives,
                ).execute()

                files = results.get("files", [])
                all_files.extend(files)
                logger.debug(f"Fetched page of {len(files)} files")

                page_token = results.get("nextPageToken")
                if not page_token:
                    break

        except HttpError as e:
            logger.error(f"Error searching files ({query}): {e}")
            raise DriveSearchError(f"Search failed: {e}", e, files=all_files) from e

        return all_files

    def create(self, metadata: dict[str, Any], media: UploadMedia | None = None) -> dict[str, Any]:
        try:
            return self.files_resource.create(
                body=self._request_body(metadata),
                media_body=self._media_body(media),
                fields=RESULT_FIELDS,
                supportsAllDrives=self.settings.drive_supports_all_drives,
            ).execute()
        except HttpError as e:
            logger.error(f"Error creating {metadata.get('name')}: {e}")
            raise DriveCreateError(f"Failed to create {metadata.get('name')}: {e}", e) from e

    def update(
        self, file_id: str, metadata: dict[str, Any], media: UploadMedia | None = None
    ) -> dict[str, Any]:
        try:
            return self.files_resource.update(
                fileId=file_id,
                body=self._request_body(metadata),
                media_body=self._media_body(media),
                fields=RESULT_FIELDS,
                supportsAllDrives=self.settings.drive_supports_all_drives,
            ).execute()
        except HttpError as e:
            logger.error(f"Error updating file {file_id}: {e}")
            if _is_not_found(e):
                raise DriveNotFoundError(f"File not found: {file_id}", e) from e
            raise DriveUpdateError(f"Failed to update file {file_id}: {e}", e) from e

    def get(self, file_id: str, fields: str) -> dict[str, Any]:
        try:
            return self.files_resource.get(
                fileId=file_id,
                fields=fields,
                supportsAllDrives=self.settings.drive_supports_all_drives,
            ).execute()
        except HttpError as e:
            logger.error(f"Error getting file {file_id}: {e}")
            if _is_not_found(e):
                raise DriveNotFoundError(f"File not found: {file_id}", e) from e
            raise DriveError(f"Failed to get file {file_id}: {e}", e) from e

    def download(self, file_id: str) -> DownloadStream:
        request = self.files_resource.get_media(
            fileId=file_id,
            supportsAllDrives=self.settings.drive_supports_all_drives,
        )
        return self._open_stream(request, file_id, DriveDownloadError)

    def export(self, file_id: str, mime_type: str) -> DownloadStream:
        request = self.files_resource.export_media(fileId=file_id, mimeType=mime_type)
        return self._open_stream(request, file_id, DriveExportError)

    def delete(self, file_id: str) -> None:
        try:
            self.files_resource.delete(
                fileId=file_id,
                supportsAllDrives=self.settings.drive_supports_all_drives,
            ).execute()
        except HttpError as e:
            logger.error(f"Error deleting file {file_id}: {e}")
            if _is_not_found(e):
                raise DriveNotFoundError(f"File not found: {file_id}", e) from e
            raise DriveDeleteError(f"Failed to delete file {file_id}: {e}", e) from e

    def _open_stream(
        self, request: Any, file_id: str, error_cls: type[DriveError]
    ) -> DownloadStream:
        """Start a download, fetching the first chunk so request errors surface here."""
        stream = DownloadStream(request, self.settings.drive_chunk_size, file_id)
        try:
            stream.fetch_chunk()
        except HttpError as e:
            stream.close()
            logger.error(f"Error downloading file {file_id}: {e}")
            if _is_not_found(e):
                raise DriveNotFoundError(f"File not found: {file_id}", e) from e
            raise error_cls(f"Failed to download file {file_id}: {e}", e) from e
        return stream

    def _request_body(self, metadata: dict[str, Any]) -> dict[str, Any]:
        body = dict(metadata)
        if "parents" in body:
            # An empty parent ID means the drive root, which Drive infers
            parents = [parent for parent in body["parents"] if parent]
            if parents:
                body["parents"] = parents
            else:
                del body["parents"]
        return body

    def _media_body(self, media: UploadMedia | None) -> MediaIoBaseUpload | None:
        if media is None:
            return None
        return MediaIoBaseUpload(
            media.content,
            mimetype=media.mime_type or FALLBACK_UPLOAD_MIME_TYPE,
            chunksize=self.settings.drive_chunk_size,
            resumable=True,
        )
