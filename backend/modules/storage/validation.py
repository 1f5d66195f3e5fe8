"""
File name and file type checks applied before anything is relayed.
"""

import re
from typing import Optional

MAX_FILE_NAME_LENGTH = 255
MAX_MIME_TYPE_LENGTH = 255
DEFAULT_MIME_TYPE = "application/octet-stream"

_INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_RESERVED_NAMES = re.compile(r"^(CON|PRN|AUX|NUL|COM[1-9]|LPT[1-9])$", re.IGNORECASE)
_MIME_TYPE = re.compile(r"^[a-z0-9][a-z0-9!#$&^_.+-]*/[a-z0-9][a-z0-9!#$&^_.+-]*$")

DANGEROUS_EXTENSIONS = frozenset({
    ".exe",
    ".bat",
    ".cmd",
    ".com",
    ".pif",
    ".scr",
    ".vbs",
    ".js",
    ".jar",
    ".ws",
    ".wsf",
    ".wsc",
    ".msi",
    ".msp",
    ".dll",
    ".sys",
    ".scf",
})

DANGEROUS_MIME_TYPES = frozenset({
    "application/x-executable",
    "application/x-msdownload",
    "application/x-msdos-program",
    "application/x-msi",
    "application/x-winexe",
    "text/javascript",
    "application/javascript",
})


def validate_file_name(file_name: str) -> bool:
    """Return True if ``file_name`` can be stored as-is."""
    if not file_name or len(file_name) > MAX_FILE_NAME_LENGTH:
        return False
    if _INVALID_CHARS.search(file_name):
        return False
    stem = file_name.split(".")[0]
    if _RESERVED_NAMES.match(stem):
        return False
    return True


def sanitize_file_name(file_name: str) -> str:
    """
    Coerce ``file_name`` into a storable name.

    Forbidden characters become underscores, surrounding whitespace and dots
    are stripped, and over-long names are truncated keeping the extension.
    Reserved device names get an underscore prefix.
    """
    sanitized = _INVALID_CHARS.sub("_", file_name).strip().strip(".")
    if not sanitized:
        sanitized = "file"

    if _RESERVED_NAMES.match(sanitized.split(".")[0]):
        sanitized = f"_{sanitized}"

    if len(sanitized) > MAX_FILE_NAME_LENGTH:
        dot = sanitized.rfind(".")
        ext = sanitized[dot:] if dot > 0 and len(sanitized) - dot <= 16 else ""
        sanitized = sanitized[: MAX_FILE_NAME_LENGTH - len(ext)] + ext

    return sanitized


def file_extension(file_name: str) -> str:
    """Lower-cased extension including the dot, or "" if there is none."""
    dot = file_name.rfind(".")
    return file_name[dot:].lower() if dot != -1 else ""


def is_allowed_file_type(mime_type: str, file_name: str) -> bool:
    """Reject executable and script types by extension or declared MIME type."""
    if file_extension(file_name) in DANGEROUS_EXTENSIONS:
        return False
    if (mime_type or "").split(";")[0].strip().lower() in DANGEROUS_MIME_TYPES:
        return False
    return True


def format_file_size(size_bytes: int) -> str:
    """Human-readable size, e.g. ``1.5 MB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    value = float(size_bytes)
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    value = round(value, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[i]}"


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """
    Reduce a client-declared content type to a bare ``type/subtype``.

    Parameters are dropped and the result lower-cased; anything missing,
    malformed or longer than the metadata column falls back to
    ``application/octet-stream``.
    """
    essence = (mime_type or "").split(";")[0].strip().lower()
    if not essence or len(essence) > MAX_MIME_TYPE_LENGTH or not _MIME_TYPE.match(essence):
        return DEFAULT_MIME_TYPE
    return essence
