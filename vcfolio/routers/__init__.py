"""
VCFolio API Routers

Each module in this package defines a FastAPI APIRouter for a specific
domain of the application (projects, documents, files, stats, etc.).
Routers are included in the main FastAPI app in main.py.
"""
