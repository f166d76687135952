"""
Stats Router — /api/stats

Endpoints:
    GET /api/stats/summary — Dashboard totals across all projects
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from .. import crud
from ..engines.valuation import summarize_portfolio
from ..schemas import PortfolioSummaryResponse

router = APIRouter(prefix="/api/stats", tags=["Stats"])


@router.get("/summary", response_model=PortfolioSummaryResponse)
def portfolio_summary(db: Session = Depends(get_db)):
    """
    Project count, total invested, total book value and overall MOIC.
    Book values are derived from each project's latest valuation and stake.
    """
    projects = crud.list_projects(db)
    return summarize_portfolio(projects, document_count=crud.count_documents(db))
