"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for attaching test evidence to Allure reports: screenshots, Playwright
traces, downloaded export files, plain text and JSON.

Attachments are declared with an explicit content type so the report renders
them correctly (image/png, text/csv, application/zip, ...).

================================================================================
"""

import json
from pathlib import Path
from typing import Any, Optional, Union

import allure
from loguru import logger


# ================================================================================
# Content Types
# ================================================================================

# Maps a file suffix to the Allure attachment type used for it
_SUFFIX_TYPES = {
    ".png": allure.attachment_type.PNG,
    ".jpg": allure.attachment_type.JPG,
    ".csv": allure.attachment_type.CSV,
    ".json": allure.attachment_type.JSON,
    ".txt": allure.attachment_type.TEXT,
    ".html": allure.attachment_type.HTML,
}

_MIME_TYPES = {
    "image/png": allure.attachment_type.PNG,
    "text/csv": allure.attachment_type.CSV,
    "application/json": allure.attachment_type.JSON,
    "text/plain": allure.attachment_type.TEXT,
    "text/html": allure.attachment_type.HTML,
}


def resolve_attachment_type(path: Union[str, Path], content_type: Optional[str] = None):
    """
    Pick the Allure attachment type for a file.

    An explicit MIME content type wins over the file suffix. Unknown types
    return None, which Allure stores as a generic binary attachment.
    """
    if content_type:
        return _MIME_TYPES.get(content_type.lower())
    return _SUFFIX_TYPES.get(Path(path).suffix.lower())


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str, ensure_ascii=False)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_file(
    path: Union[str, Path],
    name: Optional[str] = None,
    content_type: Optional[str] = None,
) -> None:
    """
    Attach a file from disk (screenshot, trace, downloaded CSV).

    Args:
        path: File to attach
        name: Attachment name, defaults to the file name
        content_type: Declared MIME type, e.g. "text/csv"
    """
    file_path = Path(path)
    if not file_path.exists():
        logger.warning(f"Attachment skipped, file does not exist: {file_path}")
        return

    attachment_type = resolve_attachment_type(file_path, content_type)
    allure.attach.file(
        str(file_path),
        name=name or file_path.name,
        attachment_type=attachment_type,
        extension=file_path.suffix.lstrip(".") or None,
    )
    logger.debug(f"Attached {file_path} as {content_type or file_path.suffix}")


__all__ = [
    "attach_json",
    "attach_text",
    "attach_file",
    "resolve_attachment_type",
]
