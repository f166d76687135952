"""
VCFolio CRUD Operations

Database access functions for projects and documents. These functions
encapsulate all SQLAlchemy queries and are called by API routers.

Architecture:
    - Each function takes a db: Session parameter (injected by FastAPI)
    - Functions return ORM model instances (routers convert to Pydantic)
    - Get functions return None if not found (routers raise 404)
    - List functions return lists (empty list if none found)
    - Domain errors (missing project, storage failures) are raised as
      VCFolioException subclasses and rendered by the app's handlers

Naming convention:
    - create_xxx: INSERT new record
    - get_xxx: SELECT single record by ID
    - list_xxx: SELECT multiple records with optional filters
    - update_xxx / set_xxx: UPDATE existing record
    - delete_xxx: DELETE record (CASCADE handles children)

File consistency policy:
    - Upload: write file first, then insert the row; if the insert fails the
      file is deleted (rollback_upload), so no orphan is left behind.
    - Delete: remove rows first, then files best-effort; a file failure never
      blocks the row deletion.
"""

import logging
from typing import BinaryIO, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from . import storage
from .exceptions import MissingFieldError, ProjectNotFoundError
from .models import Project, Document, GENERAL_DOCUMENT_TYPE
from .schemas import ProjectCreate, ProjectUpdate, DocumentCreate

logger = logging.getLogger("vcfolio.crud")

# Columns that are NOT NULL; an explicit null in an update leaves them unchanged
_REQUIRED_PROJECT_FIELDS = {"name", "investment_date", "capital_invested"}


# ---------------------------------------------------------------------------
# PROJECT CRUD
# ---------------------------------------------------------------------------

def create_project(db: Session, data: ProjectCreate) -> Project:
    """
    Create a new portfolio project.

    Args:
        db: Database session
        data: Validated project creation data

    Returns:
        The created Project ORM instance
    """
    project = Project(**data.model_dump())
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Created project %d (%s)", project.id, project.name)
    return project


def get_project(db: Session, project_id: int, with_documents: bool = False) -> Optional[Project]:
    """Get a single project by ID. Returns None if not found."""
    query = db.query(Project)
    if with_documents:
        query = query.options(selectinload(Project.documents))
    return query.filter(Project.id == project_id).first()


def list_projects(
    db: Session,
    search: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[Project]:
    """
    List projects, most recent investment first.

    Filters:
        search: Partial, case-insensitive match on project name
        limit: Maximum number of rows
    """
    query = db.query(Project)
    if search:
        query = query.filter(Project.name.ilike(f"%{search}%"))
    query = query.order_by(Project.investment_date.desc(), Project.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def update_project(db: Session, project_id: int, data: ProjectUpdate) -> Optional[Project]:
    """
    Update an existing project. Only fields present in the request change;
    optional fields may be cleared with an explicit null.
    """
    project = get_project(db, project_id)
    if not project:
        return None

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in _REQUIRED_PROJECT_FIELDS:
            continue
        setattr(project, field, value)

    db.commit()
    db.refresh(project)
    return project


def delete_project(db: Session, project_id: int) -> Optional[list[str]]:
    """
    Delete a project and its documents (CASCADE), then remove the
    documents' backing files best-effort.

    Returns:
        Stored filenames of the removed documents, or None if the project
        does not exist.
    """
    project = get_project(db, project_id, with_documents=True)
    if not project:
        return None

    stored = [d.stored_filename for d in project.documents if d.stored_filename]
    db.delete(project)
    db.commit()
    logger.info("Deleted project %d with %d stored file(s)", project_id, len(stored))

    for name in stored:
        storage.delete_stored_file(name)
    return stored


# ---------------------------------------------------------------------------
# DOCUMENT CRUD
# ---------------------------------------------------------------------------

def _require_owner(db: Session, project_id: Optional[int], doc_type: str) -> None:
    """Ensure a non-general document names an existing project."""
    if project_id is None:
        if doc_type != GENERAL_DOCUMENT_TYPE:
            raise MissingFieldError(["project_id"])
        return
    if not get_project(db, project_id):
        raise ProjectNotFoundError(project_id)


def create_document(db: Session, data: DocumentCreate) -> Document:
    """
    Register a link document (the file lives elsewhere; url is kept as-is).

    Raises:
        ProjectNotFoundError: project_id given but unknown
    """
    _require_owner(db, data.project_id, data.type)
    document = Document(**data.model_dump())
    db.add(document)
    db.commit()
    db.refresh(document)
    logger.info("Created link document %d (%s)", document.id, document.name)
    return document


def create_uploaded_document(
    db: Session,
    file_obj: BinaryIO,
    filename: str,
    name: str,
    doc_type: str,
    project_id: Optional[int] = None,
    description: Optional[str] = None,
    is_visible: bool = True,
) -> Document:
    """
    Store an uploaded file and create its Document row.

    Order of operations:
        1. validate extension and the owning project (nothing written yet)
        2. stream the file to disk (size ceiling enforced while writing)
        3. insert the row; on failure delete the file and re-raise

    Raises:
        InvalidFileTypeError, FileTooLargeError, StorageWriteError,
        ProjectNotFoundError
    """
    storage.validate_upload(filename)
    _require_owner(db, project_id, doc_type)

    stored = storage.save_upload(file_obj, filename)

    try:
        document = Document(
            name=name,
            type=doc_type,
            url=stored.url,
            stored_filename=stored.stored_filename,
            content_type=stored.content_type,
            size_bytes=stored.size_bytes,
            project_id=project_id,
            description=description or None,
            is_visible=is_visible,
        )
        db.add(document)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Database insert failed for upload %s", stored.stored_filename)
        storage.rollback_upload(stored.stored_filename)
        raise

    db.refresh(document)
    logger.info(
        "Created uploaded document %d (%s, %d bytes)",
        document.id, stored.stored_filename, stored.size_bytes,
    )
    return document


def get_document(db: Session, document_id: int) -> Optional[Document]:
    """Get a single document by ID. Returns None if not found."""
    return (
        db.query(Document)
        .options(joinedload(Document.project))
        .filter(Document.id == document_id)
        .first()
    )



def list_documents(
    db: Session,
    project_id: Optional[int] = None,
    doc_type: Optional[str] = None,
    visible: Optional[bool] = None,
    general_only: bool = False,
) -> list[Document]:
    """
    List documents, newest first.

    Filters:
        project_id: Documents owned by this project
        doc_type: Exact match on the type tag
        visible: True for visible only, False for hidden only
        general_only: Only documents without an owning project
    """
    query = db.query(Document).options(joinedload(Document.project))

    if project_id is not None:
        query = query.filter(Document.project_id == project_id)
    if general_only:
        query = query.filter(Document.project_id.is_(None))
    if doc_type:
        query = query.filter(Document.type == doc_type)
    if visible is not None:
        query = query.filter(Document.is_visible == visible)

    return query.order_by(Document.created_at.desc(), Document.id.desc()).all()


def count_documents(db: Session) -> int:
    return db.query(func.count(Document.id)).scalar() or 0


def set_document_visibility(db: Session, document_id: int, is_visible: bool) -> Optional[Document]:
    """Show or hide a document. Returns None if not found."""
    document = get_document(db, document_id)
    if not document:
        return None
    document.is_visible = is_visible
    db.commit()
    db.refresh(document)
    return document


def delete_document(db: Session, document_id: int) -> bool:
    """
    Delete a document row, then its backing file best-effort.
    Returns True if the row was deleted.
    """
    document = get_document(db, document_id)
    if not document:
        return False

    stored_filename = document.stored_filename
    db.delete(document)
    db.commit()
    logger.info("Deleted document %d", document_id)

    if stored_filename:
        storage.delete_stored_file(stored_filename)
    return True
