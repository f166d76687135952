"""
VCFolio Pydantic Schemas

Defines request/response models for the FastAPI REST API.
Pydantic validates all incoming data and serializes outgoing responses.

Architecture:
    - Create schemas: used for POST request bodies
    - Update schemas: used for PUT/PATCH request bodies (all fields optional)
    - Response schemas: used for GET/POST response serialization
    - Nested schemas: compose complex responses from simpler pieces

Naming convention:
    - XxxCreate: request body for creating Xxx
    - XxxUpdate: request body for updating Xxx
    - XxxResponse: response body for Xxx
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .models import GENERAL_DOCUMENT_TYPE

# Common tags offered by the upload form; any other non-empty tag is accepted.
KNOWN_DOCUMENT_TYPES = [
    "business_plan", "due_diligence", "contract", "receipt",
    "financial_report", "meeting_minutes", GENERAL_DOCUMENT_TYPE,
]


def normalize_document_type(value: str) -> str:
    """Lower-case a type tag and turn inner whitespace into underscores."""
    return "_".join(value.strip().lower().split())


# ---------------------------------------------------------------------------
# PROJECT SCHEMAS
# ---------------------------------------------------------------------------

class ProjectCreate(BaseModel):
    """Request body for creating a portfolio project."""
    name: str = Field(..., min_length=1, max_length=200)
    brief_intro: Optional[str] = None
    portfolio_status: Optional[str] = None
    investment_date: date
    capital_invested: float = Field(..., ge=0)
    initial_shareholding_ratio: Optional[float] = Field(None, ge=0.0, le=100.0)
    current_shareholding_ratio: Optional[float] = Field(None, ge=0.0, le=100.0)
    investment_cost: Optional[float] = Field(None, ge=0)
    latest_financing_valuation: Optional[float] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class ProjectUpdate(BaseModel):
    """Request body for updating a project. Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    brief_intro: Optional[str] = None
    portfolio_status: Optional[str] = None
    investment_date: Optional[date] = None
    capital_invested: Optional[float] = Field(None, ge=0)
    initial_shareholding_ratio: Optional[float] = Field(None, ge=0.0, le=100.0)
    current_shareholding_ratio: Optional[float] = Field(None, ge=0.0, le=100.0)
    investment_cost: Optional[float] = Field(None, ge=0)
    latest_financing_valuation: Optional[float] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        return ProjectCreate.strip_name(v)


class ProjectRef(BaseModel):
    """Minimal project reference embedded in document responses."""
    id: int
    name: str

    model_config = {"from_attributes": True}


class ProjectResponse(BaseModel):
    """Response body for a project. book_value and moic are derived."""
    id: int
    name: str
    brief_intro: Optional[str] = None
    portfolio_status: Optional[str] = None
    investment_date: date
    capital_invested: float
    initial_shareholding_ratio: Optional[float] = None
    current_shareholding_ratio: Optional[float] = None
    investment_cost: Optional[float] = None
    latest_financing_valuation: Optional[float] = None
    book_value: Optional[float] = None
    moic: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# DOCUMENT SCHEMAS
# ---------------------------------------------------------------------------

class DocumentCreate(BaseModel):
    """
    Request body for registering a link document (no file upload).
    Non-general documents must name an owning project.
    """
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=64)
    url: str = Field(..., min_length=1)
    project_id: Optional[int] = None
    description: Optional[str] = None
    is_visible: bool = True

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        v = normalize_document_type(v)
        if not v:
            raise ValueError("type must not be blank")
        return v

    @model_validator(mode="after")
    def require_project_for_typed_documents(self):
        if self.project_id is None and self.type != GENERAL_DOCUMENT_TYPE:
            raise ValueError("project_id is required unless type is 'general'")
        return self


class DocumentVisibilityUpdate(BaseModel):
    """Request body for toggling document visibility."""
    is_visible: bool


class DocumentResponse(BaseModel):
    """Response body for a document."""
    id: int
    name: str
    type: str
    url: str
    stored_filename: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: Optional[int] = None
    is_visible: bool
    description: Optional[str] = None
    project_id: Optional[int] = None
    project: Optional[ProjectRef] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ProjectDetailResponse(ProjectResponse):
    """Project with its documents."""
    documents: list[DocumentResponse] = []


class UploadLimitsResponse(BaseModel):
    """Upload limits shared with clients so both sides validate alike."""
    max_size_mb: int
    max_size_bytes: int
    allowed_extensions: list[str]
    document_types: list[str]


# ---------------------------------------------------------------------------
# AUTH SCHEMAS
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class TokenInfoResponse(BaseModel):
    subject: str
    expires_at: datetime


# ---------------------------------------------------------------------------
# STATS SCHEMAS
# ---------------------------------------------------------------------------

class PortfolioSummaryResponse(BaseModel):
    """Dashboard aggregate across all projects."""
    project_count: int
    total_invested: float
    total_book_value: float
    overall_moic: float
    document_count: int
