"""Content type negotiation for Drive uploads and downloads."""
import logging
import mimetypes
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

# Reserved namespace for Google Workspace documents
NATIVE_MIME_PREFIX = "application/vnd.google-apps"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"

CSV_MIME_TYPE = "text/csv"
DEFAULT_EXPORT_MIME_TYPE = "text/plain"

# Platform resolution of .csv differs between systems, so it is pinned here.
CONTENT_TYPE_OVERRIDES: Mapping[str, str] = MappingProxyType({
    ".csv": "text/csv; charset=utf-8",
})

# Native document subtype -> export format
# https://developers.google.com/drive/api/v3/ref-export-formats
EXPORT_FORMATS: Mapping[str, str] = MappingProxyType({
    "spreadsheet": "text/csv",
    "drawing": "text/svg",
})


def is_native_document(mime_type: str | None) -> bool:
    """Whether a MIME type denotes a Google Workspace document."""
    return bool(mime_type) and mime_type.startswith(NATIVE_MIME_PREFIX)


def extension_of(name: str) -> str:
    """Extension of the last path element, including the dot."""
    base = name.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def is_csv(content_type: str) -> bool:
    return CSV_MIME_TYPE in content_type


@dataclass(frozen=True)
class ContentTypeResolver:
    """Resolve transfer content types from file extensions."""

    overrides: Mapping[str, str] = field(default_factory=lambda: CONTENT_TYPE_OVERRIDES)

    def resolve(self, extension: str) -> str:
        """Content type for an extension such as ``.csv``.

        Returns an empty string when the extension is unknown.
        """
        extension = extension.lower()
        if extension in self.overrides:
            return self.overrides[extension]
        if not extension:
            return ""
        guessed, _ = mimetypes.guess_type(f"file{extension}", strict=False)
        return guessed or ""

    def for_name(self, name: str) -> str:
        """Content type for a file name, resolved from its extension."""
        return self.resolve(extension_of(name))


@dataclass(frozen=True)
class ExportFormatResolver:
    """Choose the export format for native documents."""

    formats: Mapping[str, str] = field(default_factory=lambda: EXPORT_FORMATS)
    default: str = DEFAULT_EXPORT_MIME_TYPE

    def export_type(self, mime_type: str) -> str:
        """Export MIME type for a native document MIME type.

        The subtype is the text after the last ``.``, e.g. ``spreadsheet``
        for ``application/vnd.google-apps.spreadsheet``.
        """
        subtype = mime_type.rsplit(".", 1)[-1]
        export_mime = self.formats.get(subtype)
        if not export_mime:
            logger.debug(f"No export format for {subtype}, using {self.default}")
            return self.default
        return export_mime
