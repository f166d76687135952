"""Export endpoints (Excel download)."""

import io

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ..database import get_db
from .. import crud
from ..engines.valuation import summarize_portfolio

router = APIRouter(prefix="/api/export", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_projects_workbook(projects: list, documents: list):
    """Build a workbook with Summary, Projects and Documents sheets."""
    import openpyxl
    wb = openpyxl.Workbook()

    # Summary sheet
    summary = summarize_portfolio(projects, document_count=len(documents))
    ws = wb.active
    ws.title = "Summary"
    ws.append(["Projects", summary["project_count"]])
    ws.append(["Total Invested", summary["total_invested"]])
    ws.append(["Total Book Value", summary["total_book_value"]])
    ws.append(["Overall MOIC", summary["overall_moic"]])
    ws.append(["Documents", summary["document_count"]])

    # Projects sheet
    ws2 = wb.create_sheet("Projects")
    ws2.append([
        "ID", "Name", "Status", "Investment Date", "Capital Invested",
        "Initial Stake (%)", "Current Stake (%)", "Investment Cost",
        "Latest Valuation", "Book Value", "MOIC",
    ])
    for p in projects:
        ws2.append([
            p.id, p.name, p.portfolio_status, p.investment_date, p.capital_invested,
            p.initial_shareholding_ratio, p.current_shareholding_ratio, p.investment_cost,
            p.latest_financing_valuation, p.book_value, p.moic,
        ])

    # Documents sheet
    ws3 = wb.create_sheet("Documents")
    ws3.append(["ID", "Project", "Name", "Type", "URL", "Visible", "Created"])
    for d in documents:
        ws3.append([
            d.id, d.project.name if d.project else "(general)", d.name, d.type,
            d.url, "yes" if d.is_visible else "no", d.created_at,
        ])

    return wb


@router.get("/projects")
def export_projects_excel(db: Session = Depends(get_db)):
    projects = crud.list_projects(db)
    documents = crud.list_documents(db)
    wb = build_projects_workbook(projects, documents)

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)

    return StreamingResponse(
        buf,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=portfolio_projects.xlsx"},
    )
