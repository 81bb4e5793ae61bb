"""Upload cataloging helpers."""

from filecat.catalog.file_types import (
    CatalogSummary,
    detect_mime_type,
    format_file_size,
    generate_file_path,
    get_folder_path,
    get_mime_type_from_extension,
    summarize_json_upload,
)

__all__ = [
    "CatalogSummary",
    "detect_mime_type",
    "format_file_size",
    "generate_file_path",
    "get_folder_path",
    "get_mime_type_from_extension",
    "summarize_json_upload",
]
