"""
VCFolio Document Storage

Local-disk storage for uploaded documents. Files live in one flat
directory (settings.UPLOAD_DIR) under collision-free names of the form
"<uuid4 hex>-<sanitized original name>".

Responsibilities:
    - validate extension and size against the shared Settings limits
    - stream uploads to disk in chunks, enforcing the size ceiling while writing
    - resolve stored names back to paths, refusing anything outside the upload dir
    - best-effort deletion (missing files and OS errors are logged, not raised)

The database never sees a file that failed to write; callers that fail to
insert a row after a successful write call rollback_upload().
"""

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import BinaryIO, Optional

from .config import get_settings
from .exceptions import FileTooLargeError, InvalidFileTypeError, StorageWriteError

logger = logging.getLogger("vcfolio.storage")

CHUNK_SIZE = 1024 * 1024
MAX_FILENAME_LENGTH = 150
FILES_ROUTE_PREFIX = "/api/files/"

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".zip": "application/zip",
    ".rar": "application/x-rar-compressed",
    ".7z": "application/x-7z-compressed",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_STORED_PREFIX = re.compile(r"^[0-9a-f]{32}-")


@dataclass(frozen=True)
class StoredFile:
    """Result of a successful write to the upload directory."""
    stored_filename: str
    size_bytes: int
    content_type: str

    @property
    def url(self) -> str:
        return file_url(self.stored_filename)


def upload_dir() -> Path:
    """Return the upload directory, creating it if needed."""
    path = Path(get_settings().UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def file_url(stored_filename: str) -> str:
    return f"{FILES_ROUTE_PREFIX}{stored_filename}"


def file_extension(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    Directory components are dropped (both / and \\ separators), characters
    outside [A-Za-z0-9._-] become underscores, leading dots are removed and
    the stem is shortened so the result fits MAX_FILENAME_LENGTH while
    keeping the extension. Never returns an empty string.
    """
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    if not name:
        return "file"

    if len(name) > MAX_FILENAME_LENGTH:
        suffix = file_extension(name)[:16]
        name = name[: MAX_FILENAME_LENGTH - len(suffix)] + suffix
    return name


def generate_stored_name(original_filename: Optional[str]) -> str:
    return f"{uuid.uuid4().hex}-{sanitize_filename(original_filename)}"


def display_filename(stored_filename: str) -> str:
    """Strip the uuid prefix added by generate_stored_name()."""
    match = _STORED_PREFIX.match(stored_filename)
    return stored_filename[match.end():] if match else stored_filename


def guess_content_type(filename: str) -> str:
    return MIME_TYPES.get(file_extension(filename), DEFAULT_MIME_TYPE)


def validate_upload(filename: str, size_bytes: Optional[int] = None) -> None:
    """
    Check a prospective upload against the configured limits.

    Raises:
        InvalidFileTypeError: extension not in ALLOWED_EXTENSIONS
        FileTooLargeError: declared size over MAX_UPLOAD_SIZE_MB
    """
    allowed = get_settings().allowed_extensions_list
    if file_extension(filename) not in allowed:
        raise InvalidFileTypeError(filename, allowed)
    check_size(size_bytes)


def check_size(size_bytes: Optional[int]) -> None:
    """Raise FileTooLargeError if a declared size is over the ceiling. None passes."""
    settings = get_settings()
    if size_bytes is not None and size_bytes > settings.max_upload_size_bytes:
        raise FileTooLargeError(settings.MAX_UPLOAD_SIZE_MB)


def save_upload(file_obj: BinaryIO, original_filename: str) -> StoredFile:
    """
    Stream file_obj into the upload directory.

    The size ceiling is enforced on the bytes actually read, so a client
    that under-reports its size still cannot exceed it. On any failure the
    partial file is removed before the error propagates.

    Raises:
        FileTooLargeError: more than MAX_UPLOAD_SIZE_MB bytes were read
        StorageWriteError: the file could not be written
    """
    settings = get_settings()
    limit = settings.max_upload_size_bytes
    stored_filename = generate_stored_name(original_filename)
    target = upload_dir() / stored_filename

    written = 0
    try:
        with open(target, "xb") as out:
            while True:
                chunk = file_obj.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > limit:
                    raise FileTooLargeError(settings.MAX_UPLOAD_SIZE_MB)
                out.write(chunk)
    except FileTooLargeError:
        logger.warning("Upload %s exceeded %d bytes, discarding", original_filename, limit)
        _remove_quietly(target)
        raise
    except OSError:
        logger.exception("Failed to write upload %s to %s", original_filename, target)
        _remove_quietly(target)
        raise StorageWriteError(original_filename)

    logger.info("Stored upload %s as %s (%d bytes)", original_filename, stored_filename, written)
    return StoredFile(
        stored_filename=stored_filename,
        size_bytes=written,
        content_type=guess_content_type(original_filename),
    )


def resolve_path(stored_filename: str) -> Optional[Path]:
    """
    Map a stored name (or sub-path) to an existing file inside the upload dir.

    Returns None when the name escapes the directory, is not a valid path
    on this filesystem (NUL bytes, over-long segments), or no file exists.
    """
    if not stored_filename:
        return None
    base = upload_dir().resolve()
    try:
        candidate = (base / stored_filename).resolve()
        if base not in candidate.parents:
            logger.warning("Rejected path outside upload directory: %s", stored_filename)
            return None
        if not candidate.is_file():
            return None
    except (OSError, ValueError):
        logger.warning("Rejected unusable file path: %r", stored_filename)
        return None
    return candidate


def delete_stored_file(stored_filename: Optional[str]) -> bool:
    """
    Best-effort removal of a stored file.

    Returns True if a file was removed. A missing file or an OS error is
    logged and reported as False; it is never raised.
    """
    if not stored_filename:
        return False
    path = resolve_path(stored_filename)
    if path is None:
        logger.warning("Stored file already missing: %s", stored_filename)
        return False
    try:
        path.unlink()
    except OSError:
        logger.exception("Failed to delete stored file: %s", stored_filename)
        return False
    logger.info("Deleted stored file: %s", stored_filename)
    return True


def rollback_upload(stored_filename: str) -> None:
    """Delete a freshly written file after its database insert failed."""
    logger.warning("Rolling back upload, deleting file: %s", stored_filename)
    if not delete_stored_file(stored_filename):
        logger.error("Rollback left an orphaned file: %s", stored_filename)


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.exception("Failed to remove partial upload: %s", path)
