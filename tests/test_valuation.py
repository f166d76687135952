"""Tests for the valuation engine."""

from types import SimpleNamespace

import pytest

from vcfolio.engines.valuation import compute_book_value, compute_moic, summarize_portfolio


def _project(**kwargs):
    fields = dict(
        capital_invested=None, investment_cost=None,
        latest_financing_valuation=None, current_shareholding_ratio=None,
    )
    fields.update(kwargs)
    return SimpleNamespace(**fields)


class TestBookValue:
    def test_book_value_from_valuation_and_stake(self):
        assert compute_book_value(1_000_000, 20) == pytest.approx(200_000)

    def test_book_value_zero_stake(self):
        assert compute_book_value(1_000_000, 0) == 0

    def test_book_value_missing_inputs(self):
        assert compute_book_value(None, 20) is None
        assert compute_book_value(1_000_000, None) is None


class TestMOIC:
    def test_moic_two_x(self):
        assert compute_moic(200_000, 100_000) == 2.00

    def test_moic_rounds_to_two_decimals(self):
        assert compute_moic(100_000, 30_000) == 3.33

    def test_moic_zero_cost(self):
        assert compute_moic(200_000, 0) is None

    def test_moic_missing_inputs(self):
        assert compute_moic(None, 100_000) is None
        assert compute_moic(200_000, None) is None


class TestSummary:
    def test_empty_portfolio(self):
        summary = summarize_portfolio([])
        assert summary["project_count"] == 0
        assert summary["total_invested"] == 0
        assert summary["overall_moic"] == 0

    def test_totals_and_overall_moic(self):
        projects = [
            _project(capital_invested=100_000, investment_cost=100_000,
                     latest_financing_valuation=1_000_000, current_shareholding_ratio=20),
            _project(capital_invested=300_000, investment_cost=300_000,
                     latest_financing_valuation=2_000_000, current_shareholding_ratio=10),
        ]
        summary = summarize_portfolio(projects, document_count=3)
        assert summary["project_count"] == 2
        assert summary["total_invested"] == pytest.approx(400_000)
        assert summary["total_book_value"] == pytest.approx(400_000)
        assert summary["overall_moic"] == 1.0
        assert summary["document_count"] == 3

    def test_invested_falls_back_to_cost(self):
        projects = [_project(capital_invested=None, investment_cost=50_000)]
        assert summarize_portfolio(projects)["total_invested"] == pytest.approx(50_000)

    def test_project_without_valuation_contributes_no_book_value(self):
        projects = [_project(capital_invested=10_000)]
        summary = summarize_portfolio(projects)
        assert summary["total_book_value"] == 0
        assert summary["overall_moic"] == 0
