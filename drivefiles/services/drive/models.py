"""Drive file metadata."""
from dataclasses import dataclass, field
from typing import Any

from drivefiles.services.drive.mime import FOLDER_MIME_TYPE, is_native_document


@dataclass
class DriveFile:
    """Drive file information."""
    id: str
    name: str
    parents: list[str] = field(default_factory=list)
    mime_type: str | None = None
    shared: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, resource: dict[str, Any]) -> "DriveFile":
        """Build from a Drive API file resource."""
        return cls(
            id=resource["id"],
            name=resource.get("name", ""),
            parents=list(resource.get("parents", [])),
            mime_type=resource.get("mimeType"),  # not requested by searches
            shared=bool(resource.get("shared", False)),
            raw=dict(resource),
        )

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE

    @property
    def is_native_document(self) -> bool:
        return is_native_document(self.mime_type)
