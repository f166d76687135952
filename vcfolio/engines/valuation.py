"""
VCFolio — Valuation Module

Derived valuation figures for portfolio projects. These values are never
stored; every read path computes them from the source fields so they
cannot drift out of sync.

Formulas:
    book_value = latest_financing_valuation × current_shareholding_ratio / 100
    moic       = book_value / investment_cost

Shareholding ratios are percentages (20 means 20%).
"""

from typing import Iterable, Optional

MOIC_DECIMALS = 2


def compute_book_value(
    latest_financing_valuation: Optional[float],
    current_shareholding_ratio: Optional[float],
) -> Optional[float]:
    """
    Book value of the current stake at the latest financing round.

    Args:
        latest_financing_valuation: Post-money valuation of the latest round.
        current_shareholding_ratio: Current stake in percent (0–100).

    Returns:
        Book value, or None if either input is missing.
    """
    if latest_financing_valuation is None or current_shareholding_ratio is None:
        return None
    return latest_financing_valuation * current_shareholding_ratio / 100


def compute_moic(
    book_value: Optional[float],
    investment_cost: Optional[float],
) -> Optional[float]:
    """
    Multiple on invested capital, rounded to two decimals.

    Returns None when book value is unknown or investment cost is
    missing or zero.
    """
    if book_value is None or not investment_cost:
        return None
    return round(book_value / investment_cost, MOIC_DECIMALS)


def summarize_portfolio(projects: Iterable, document_count: int = 0) -> dict:
    """
    Aggregate dashboard figures across all projects.

    Capital invested falls back to investment cost for projects that
    never recorded a committed amount. Overall MOIC is total book value
    over total invested, or 0 when nothing was invested.

    Args:
        projects: Project ORM instances (or any objects with the same fields).
        document_count: Number of stored documents, passed through as-is.

    Returns:
        Dict with project_count, total_invested, total_book_value,
        overall_moic, document_count.
    """
    project_count = 0
    total_invested = 0.0
    total_book_value = 0.0

    for project in projects:
        project_count += 1
        invested = project.capital_invested
        if invested is None:
            invested = project.investment_cost
        total_invested += invested or 0.0

        book_value = compute_book_value(
            project.latest_financing_valuation,
            project.current_shareholding_ratio,
        )
        total_book_value += book_value or 0.0

    overall_moic = (
        round(total_book_value / total_invested, MOIC_DECIMALS)
        if total_invested > 0 else 0.0
    )

    return {
        "project_count": project_count,
        "total_invested": total_invested,
        "total_book_value": total_book_value,
        "overall_moic": overall_moic,
        "document_count": document_count,
    }
