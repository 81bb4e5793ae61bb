"""
File type helpers for the upload path.

MIME detection by extension, storage folder assignment, storage path
generation and the category/confidence summary recorded in file
metadata. All functions are pure; uploading and persisting are left to
the callers.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Optional, Union

from filecat.ingest.json_processor import JsonAnalyzer
from filecat.ingest.parser import ParseError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
JSON_MIME_TYPE = "application/json"

EXTENSION_MIME_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "txt": "text/plain",
    "csv": "text/csv",
    "json": JSON_MIME_TYPE,
    "xml": "application/xml",
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "ts": "application/typescript",
    "py": "text/x-python",
    "java": "text/x-java-source",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "m4a": "audio/mp4",
    "ogg": "audio/ogg",
    "mp4": "video/mp4",
    "avi": "video/avi",
    "mov": "video/quicktime",
    "wmv": "video/x-ms-wmv",
    "mkv": "video/x-matroska",
    "zip": "application/zip",
    "rar": "application/x-rar-compressed",
    "7z": "application/x-7z-compressed",
    "gz": "application/gzip",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.\-]")


@dataclass(frozen=True)
class CatalogSummary:
    """Category and confidence recorded in the file metadata store."""
    category: str
    confidence: float

    @classmethod
    def unclassified(cls) -> "CatalogSummary":
        return cls(category="Unclassified", confidence=0.0)

    def to_dict(self):
        return {"category": self.category, "confidence": self.confidence}


def get_mime_type_from_extension(filename: str) -> str:
    """Look up a MIME type by file extension."""
    ext = filename.lower().rsplit(".", 1)[-1] if "." in filename else ""
    return EXTENSION_MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def detect_mime_type(filename: str, content_type: Optional[str] = None) -> str:
    """
    Resolve the MIME type of an upload.

    A specific client-declared content type wins; generic or missing
    ones fall back to the extension lookup.
    """
    if content_type:
        content_type = content_type.split(";", 1)[0].strip().lower()
    if content_type and content_type != DEFAULT_MIME_TYPE:
        return content_type
    return get_mime_type_from_extension(filename)


def get_folder_path(mime_type: str) -> str:
    """Storage folder for a MIME type."""
    if mime_type.startswith("image/"):
        return "media/images/"
    elif mime_type.startswith("video/"):
        return "media/videos/"
    elif "pdf" in mime_type or "document" in mime_type or mime_type.startswith("text/"):
        return "media/documents/"
    elif mime_type == JSON_MIME_TYPE:
        return "media/json/"
    else:
        return "media/others/"


def generate_file_path(
    original_name: str,
    folder_path: str,
    timestamp_ms: Optional[int] = None,
) -> str:
    """Build a unique storage path: ``{folder}{timestamp}_{sanitized name}``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    sanitized = _UNSAFE_FILENAME_CHARS.sub("_", original_name)
    return f"{folder_path}{timestamp_ms}_{sanitized}"


def format_file_size(size_bytes: int) -> str:
    """Human-readable file size, e.g. ``1.5 KB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    i = 0
    while size_bytes >= 1024 ** (i + 1) and i < len(SIZE_UNITS) - 1:
        i += 1
    value = round(size_bytes / 1024 ** i, 2)
    # Drop trailing zeros: 1.50 -> 1.5, 2.00 -> 2
    return f"{value:g} {SIZE_UNITS[i]}"


def summarize_json_upload(
    content: Union[str, bytes],
    analyzer: Optional[JsonAnalyzer] = None,
) -> CatalogSummary:
    """
    Category/confidence for an uploaded JSON file.

    Parse failures do not propagate: the file is catalogued as
    ``JSON (Parse Error)`` with reduced confidence.
    """
    analyzer = analyzer or JsonAnalyzer()
    try:
        result = analyzer.analyze(content)
    except ParseError as e:
        logger.info(
            "JSON upload could not be analyzed",
            extra={"extra_fields": {"error": e.message}},
        )
        return CatalogSummary(category="JSON (Parse Error)", confidence=0.5)

    return CatalogSummary(
        category=f"JSON ({result.storage_type.value})",
        confidence=0.95,
    )
