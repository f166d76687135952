"""
Project CRUD Router — /api/projects

Portfolio project records. Reads are public; every mutation requires an
admin token (see vcfolio.auth.require_admin).

Endpoints:
    GET    /api/projects          — List projects (optional search / limit)
    POST   /api/projects          — Create a project
    GET    /api/projects/{id}     — Get a project with its documents
    PUT    /api/projects/{id}     — Update a project
    DELETE /api/projects/{id}     — Delete a project, its documents and their files
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import require_admin
from ..database import get_db
from .. import crud
from ..exceptions import ProjectNotFoundError
from ..schemas import ProjectCreate, ProjectUpdate, ProjectResponse, ProjectDetailResponse

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("", response_model=list[ProjectResponse])
def list_projects(
    search: Optional[str] = Query(None, description="Partial match on project name"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of projects"),
    db: Session = Depends(get_db),
):
    """List projects, most recent investment first."""
    return crud.list_projects(db, search=search, limit=limit)


@router.post(
    "", response_model=ProjectResponse, status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_project(data: ProjectCreate, db: Session = Depends(get_db)):
    """
    Create a project. name, investment_date and capital_invested are
    required; a request missing any of them is rejected with 400.
    """
    return crud.create_project(db, data)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
def get_project(project_id: int, db: Session = Depends(get_db)):
    """Get a single project including its documents."""
    project = crud.get_project(db, project_id, with_documents=True)
    if not project:
        raise ProjectNotFoundError(project_id)
    return project


@router.put(
    "/{project_id}", response_model=ProjectResponse,
    dependencies=[Depends(require_admin)],
)
def update_project(project_id: int, data: ProjectUpdate, db: Session = Depends(get_db)):
    """Update an existing project. Only provided fields are updated."""
    project = crud.update_project(db, project_id, data)
    if not project:
        raise ProjectNotFoundError(project_id)
    return project


@router.delete("/{project_id}", status_code=200, dependencies=[Depends(require_admin)])
def delete_project(project_id: int, db: Session = Depends(get_db)):
    """
    Delete a project and all of its documents (CASCADE delete).
    Backing files are removed best-effort; a missing file does not fail
    the request.
    """
    removed = crud.delete_project(db, project_id)
    if removed is None:
        raise ProjectNotFoundError(project_id)
    return {
        "detail": f"Project {project_id} deleted successfully",
        "deleted_files": len(removed),
    }
