"""Seed the database with sample portfolio projects and link documents."""

import sys
import os
from datetime import date
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from vcfolio.database import init_db, SessionLocal
from vcfolio import crud, schemas

PROJECTS = [
    {"name": "Lumen Robotics", "brief_intro": "Warehouse picking robots",
     "portfolio_status": "Series B", "investment_date": date(2021, 3, 15),
     "capital_invested": 2_000_000, "initial_shareholding_ratio": 12.0,
     "current_shareholding_ratio": 9.5, "investment_cost": 2_000_000,
     "latest_financing_valuation": 60_000_000},
    {"name": "Greenleaf Bio", "brief_intro": "Plant-based enzyme platform",
     "portfolio_status": "Series A", "investment_date": date(2022, 7, 1),
     "capital_invested": 1_500_000, "initial_shareholding_ratio": 15.0,
     "current_shareholding_ratio": 15.0, "investment_cost": 1_500_000,
     "latest_financing_valuation": 18_000_000},
    {"name": "Harbor Pay", "brief_intro": "Cross-border B2B payments",
     "portfolio_status": "Seed", "investment_date": date(2023, 1, 20),
     "capital_invested": 500_000, "initial_shareholding_ratio": 8.0,
     "current_shareholding_ratio": 8.0, "investment_cost": 500_000,
     "latest_financing_valuation": 6_250_000},
    {"name": "Quarry Analytics", "brief_intro": "Geospatial analytics for mining",
     "portfolio_status": "Written down", "investment_date": date(2020, 11, 5),
     "capital_invested": 1_000_000, "initial_shareholding_ratio": 10.0,
     "current_shareholding_ratio": 6.0, "investment_cost": 1_000_000,
     "latest_financing_valuation": 5_000_000},
]

DOCUMENTS = {
    "Lumen Robotics": [
        {"name": "Series B term sheet", "type": "contract",
         "url": "https://example.com/docs/lumen-series-b.pdf"},
    ],
    "Greenleaf Bio": [
        {"name": "Due diligence memo", "type": "due_diligence",
         "url": "https://example.com/docs/greenleaf-dd.pdf"},
    ],
}


def seed():
    init_db()
    db = SessionLocal()
    try:
        if crud.list_projects(db, limit=1):
            print("Database already seeded, skipping.")
            return

        for p in PROJECTS:
            project = crud.create_project(db, schemas.ProjectCreate(**p))
            for d in DOCUMENTS.get(project.name, []):
                crud.create_document(db, schemas.DocumentCreate(project_id=project.id, **d))
            print(f"  + {project.name}: book value {project.book_value:,.0f}, MOIC {project.moic}")

        print(f"Seeded {len(PROJECTS)} projects.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
