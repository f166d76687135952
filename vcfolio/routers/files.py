"""
File Serving Router — /api/files

Streams uploaded documents back from the upload directory. The path is
the stored filename recorded on the Document row (the part of its url
after /api/files/).

Endpoints:
    GET /api/files/{path} — Stream a stored file inline
"""

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from .. import storage
from ..exceptions import StoredFileNotFoundError

logger = logging.getLogger("vcfolio.routers.files")

router = APIRouter(prefix="/api/files", tags=["Files"])


@router.get("/{path:path}")
def serve_file(path: str):
    """
    Stream a stored file with a Content-Type resolved from its extension.

    Returns 404 when no such file exists, including when a Document row
    still points at a file that has since disappeared from disk.
    """
    full_path = storage.resolve_path(path)
    if full_path is None:
        logger.warning("Requested file not found: %s", path)
        raise StoredFileNotFoundError(path)

    return FileResponse(
        full_path,
        media_type=storage.guess_content_type(full_path.name),
        filename=storage.display_filename(full_path.name),
        content_disposition_type="inline",
    )
