"""
VCFolio ORM Models

Defines the two database tables using SQLAlchemy 2.0 mapped_column style.

Architecture:
    - All models inherit from Base (defined in database.py)
    - Relationships defined with back_populates for bidirectional access
    - CASCADE deletes configured so removing a project removes its documents
    - A CHECK constraint allows owner-less documents only for the "general" type

Tables:
    - projects: Portfolio investment records
    - documents: Stored files (or external links) with metadata

Book value and MOIC are exposed as read-only properties derived from the
source columns; they have no columns of their own.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Integer, Float, Text, Boolean, Date, DateTime, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base
from .engines.valuation import compute_book_value, compute_moic

GENERAL_DOCUMENT_TYPE = "general"


class Project(Base):
    """
    A tracked venture investment ("portfolio" in the UI).

    Shareholding ratios are stored as percentages (20.0 = 20%).
    """
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    brief_intro: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    portfolio_status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    investment_date: Mapped[date] = mapped_column(Date, nullable=False)
    capital_invested: Mapped[float] = mapped_column(Float, nullable=False)
    initial_shareholding_ratio: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    current_shareholding_ratio: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    investment_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    latest_financing_valuation: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    documents: Mapped[list["Document"]] = relationship(
        "Document", back_populates="project", cascade="all, delete-orphan",
        passive_deletes=True, order_by="Document.created_at.desc()",
    )

    @property
    def book_value(self) -> Optional[float]:
        return compute_book_value(
            self.latest_financing_valuation, self.current_shareholding_ratio
        )

    @property
    def moic(self) -> Optional[float]:
        return compute_moic(self.book_value, self.investment_cost)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}')>"


class Document(Base):
    """
    A document attached to a project, or a general document with no owner.

    Uploaded files have stored_filename set and url pointing at the file
    route; link documents only carry a url.
    """
    __tablename__ = "documents"
    __table_args__ = (
        CheckConstraint(
            f"project_id IS NOT NULL OR type = '{GENERAL_DOCUMENT_TYPE}'",
            name="ck_document_owner",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    stored_filename: Mapped[Optional[str]] = mapped_column(Text, nullable=True, unique=True)
    content_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    size_bytes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    project_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    # Relationship
    project: Mapped[Optional["Project"]] = relationship("Project", back_populates="documents")

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, name='{self.name}', type='{self.type}')>"
