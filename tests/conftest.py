"""Shared fixtures for Drive file service tests."""
import io
import itertools

import pytest

from drivefiles.services.drive.client import DriveFilesService
from drivefiles.services.drive.exceptions import DriveNotFoundError


class FakeStore:
    """In-memory RemoteStore recording every call."""

    def __init__(self):
        self.files: dict[str, dict] = {}
        self.contents: dict[str, bytes] = {}
        self.calls: list[tuple] = []
        self.streams: list = []
        self._ids = (f"id{n}" for n in itertools.count(1))

    def add(self, name, parents=("",), mime_type="text/plain", content=b""):
        file_id = next(self._ids)
        self.files[file_id] = {
            "id": file_id,
            "name": name,
            "parents": list(parents),
            "mimeType": mime_type,
            "shared": False,
        }
        self.contents[file_id] = content
        return file_id

    def calls_to(self, operation):
        return [call for call in self.calls if call[0] == operation]

    def search(self, query, fields):
        self.calls.append(("search", query, fields))
        name_clause, _, parent_clause = query.partition(" and ")
        name = name_clause[len("name = '"):-1].replace("\\'", "'").replace("\\\\", "\\")
        parent = parent_clause.split("'")[1] if parent_clause else None
        return [
            {k: v for k, v in f.items() if k != "mimeType"}
            for f in self.files.values()
            if f["name"] == name and (parent is None or parent in f["parents"])
        ]

    def create(self, metadata, media=None):
        self.calls.append(("create", metadata, media))
        file_id = self.add(
            metadata["name"],
            metadata.get("parents", []),
            metadata.get("mimeType") or (media.mime_type if media else ""),
            media.content.read() if media else b"",
        )
        return dict(self.files[file_id])

    def update(self, file_id, metadata, media=None):
        self.calls.append(("update", file_id, metadata, media))
        if file_id not in self.files:
            raise DriveNotFoundError(f"File not found: {file_id}")
        if media is not None:
            self.contents[file_id] = media.content.read()
        return dict(self.files[file_id])

    def get(self, file_id, fields):
        self.calls.append(("get", file_id, fields))
        if file_id not in self.files:
            raise DriveNotFoundError(f"File not found: {file_id}")
        return dict(self.files[file_id])

    def download(self, file_id):
        self.calls.append(("download", file_id))
        return self._stream(self.contents[file_id])

    def export(self, file_id, mime_type):
        self.calls.append(("export", file_id, mime_type))
        return self._stream(self.contents[file_id])

    def delete(self, file_id):
        self.calls.append(("delete", file_id))
        if self.files.pop(file_id, None) is None:
            raise DriveNotFoundError(f"File not found: {file_id}")
        self.contents.pop(file_id, None)

    def _stream(self, content):
        stream = io.BytesIO(content)
        self.streams.append(stream)
        return stream


@pytest.fixture
def store():
    """Empty in-memory store."""
    return FakeStore()


@pytest.fixture
def service(store):
    """Drive file service over the in-memory store."""
    return DriveFilesService(store)
