"""
Document Router — /api/documents

Documents are either uploaded files (stored on local disk, served through
/api/files) or links to files hosted elsewhere. A document belongs to one
project, except "general" documents, which have no owner.

Endpoints:
    GET    /api/documents          — List documents (filters: project_id, type, visible, general)
    GET    /api/documents/limits   — Upload size/type limits shared with clients
    POST   /api/documents          — Register a link document (JSON)
    POST   /api/documents/upload   — Upload a file (multipart/form-data)
    GET    /api/documents/{id}     — Get a document
    PATCH  /api/documents/{id}     — Show or hide a document
    DELETE /api/documents/{id}     — Delete a document and its stored file
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ..auth import require_admin
from ..config import get_settings
from ..database import get_db
from .. import crud, storage
from ..exceptions import DocumentNotFoundError, MissingFieldError
from ..schemas import (
    DocumentCreate, DocumentResponse, DocumentVisibilityUpdate,
    UploadLimitsResponse, KNOWN_DOCUMENT_TYPES, normalize_document_type,
)

logger = logging.getLogger("vcfolio.routers.documents")

router = APIRouter(prefix="/api/documents", tags=["Documents"])


@router.get("", response_model=list[DocumentResponse])
def list_documents(
    project_id: Optional[int] = Query(None, description="Only documents of this project"),
    type: Optional[str] = Query(None, description="Filter by document type tag"),
    visible: Optional[bool] = Query(None, description="True: visible only, False: hidden only"),
    general: bool = Query(False, description="Only documents without an owning project"),
    db: Session = Depends(get_db),
):
    """List documents, newest first."""
    doc_type = normalize_document_type(type) if type else None
    return crud.list_documents(
        db, project_id=project_id, doc_type=doc_type,
        visible=visible, general_only=general,
    )


@router.get("/limits", response_model=UploadLimitsResponse)
def upload_limits():
    """Expose the configured upload ceiling and accepted extensions."""
    settings = get_settings()
    return UploadLimitsResponse(
        max_size_mb=settings.MAX_UPLOAD_SIZE_MB,
        max_size_bytes=settings.max_upload_size_bytes,
        allowed_extensions=settings.allowed_extensions_list,
        document_types=KNOWN_DOCUMENT_TYPES,
    )


@router.post(
    "", response_model=DocumentResponse, status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_document(data: DocumentCreate, db: Session = Depends(get_db)):
    """
    Register a document that lives at an external URL.
    Returns 404 if project_id does not exist.
    """
    return crud.create_document(db, data)


@router.post(
    "/upload", response_model=DocumentResponse, status_code=201,
    dependencies=[Depends(require_admin)],
)
def upload_document(
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    project_id: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    is_visible: bool = Form(True),
    db: Session = Depends(get_db),
):
    """
    Upload a file and create its Document record.

    Form fields:
        file: the document (required)
        name: display name (required)
        type: type tag (required); "general" documents may omit project_id
        project_id: owning project (required for every other type)
        description: optional free text

    Errors:
        400 missing fields or disallowed extension, 404 unknown project,
        413 over the size ceiling, 500 disk or database failure.
    """
    missing = []
    if file is None or not file.filename:
        missing.append("file")
    if not name or not name.strip():
        missing.append("name")
    doc_type = normalize_document_type(type) if type else ""
    if not doc_type:
        missing.append("type")
    if missing:
        raise MissingFieldError(missing)

    owner_id = None
    if project_id is not None and project_id.strip():
        try:
            owner_id = int(project_id)
        except ValueError:
            raise MissingFieldError(["project_id"])

    storage.check_size(file.size)

    logger.info(
        "Document upload received: file=%s project_id=%s type=%s",
        file.filename, owner_id, doc_type,
    )
    try:
        return crud.create_uploaded_document(
            db,
            file_obj=file.file,
            filename=file.filename,
            name=name.strip(),
            doc_type=doc_type,
            project_id=owner_id,
            description=description,
            is_visible=is_visible,
        )
    finally:
        file.file.close()


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(document_id: int, db: Session = Depends(get_db)):
    """Get a single document by ID."""
    document = crud.get_document(db, document_id)
    if not document:
        raise DocumentNotFoundError(document_id)
    return document


@router.patch(
    "/{document_id}", response_model=DocumentResponse,
    dependencies=[Depends(require_admin)],
)
def update_document_visibility(
    document_id: int, data: DocumentVisibilityUpdate, db: Session = Depends(get_db),
):
    """Show or hide a document."""
    document = crud.set_document_visibility(db, document_id, data.is_visible)
    if not document:
        raise DocumentNotFoundError(document_id)
    return document


@router.delete("/{document_id}", status_code=200, dependencies=[Depends(require_admin)])
def delete_document(document_id: int, db: Session = Depends(get_db)):
    """Delete a document. Its stored file is removed best-effort."""
    if not crud.delete_document(db, document_id):
        raise DocumentNotFoundError(document_id)
    return {"detail": f"Document {document_id} deleted successfully"}
