"""
VCFolio Backend Package

FastAPI-based backend for tracking venture investment portfolios.
Provides REST API endpoints for project management, document upload
and retrieval, and portfolio valuation summaries.
"""

__version__ = "1.0.0"
