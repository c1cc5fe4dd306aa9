"""Tests for renderer formatting and output."""

import os
import sys
import pytest
from io import StringIO
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
from calc.allocation_planner import AllocationPlanner
from model.AllocationState import AllocationState
from model.Breakdown import Breakdown
from render.renderers import (
    RENDERER_REGISTRY,
    AllocationsRenderer,
    BreakdownRenderer,
    DashboardRenderer,
    LimitsRenderer,
    combined_401k_banner,
    format_bar,
    format_currency,
    format_percent,
    limit_hint,
    savings_progress,
    savings_status,
)


@pytest.fixture
def planner(limits_2024):
    return AllocationPlanner(AllocationState(), limits_2024)


def render_to_string(renderer, planner):
    output = StringIO()
    old_stdout = sys.stdout
    sys.stdout = output
    try:
        renderer.render(planner)
    finally:
        sys.stdout = old_stdout
    return output.getvalue()


class TestFormatting:

    @pytest.mark.parametrize("value,expected", [
        (0, "$0"),
        (1234.4, "$1,234"),
        (1234.5, "$1,234"),
        (100000, "$100,000"),
        (-1200, "-$1,200"),
        (-0.3, "$0"),
        (None, "$0"),
        (float('nan'), "$0"),
    ])
    def test_format_currency(self, value, expected):
        assert format_currency(value) == expected

    def test_format_percent(self):
        assert format_percent(26) == "26.0%"
        assert format_percent(12.5) == "12.5%"

    def test_format_bar(self):
        bar = format_bar({'pre_tax': 0, 'taxes': 22, 'post_tax': 0, 'take_home': 78})
        assert bar == "[" + "T" * 11 + "H" * 39 + "]"

    def test_format_bar_empty(self):
        assert format_bar({}, width=10) == "[" + "." * 10 + "]"


class TestSavingsStatus:

    def test_no_income(self):
        assert savings_status(Breakdown()) == "Enter your income to get started"

    def test_meeting_target(self):
        b = Breakdown(gross_annual=100000, savings_rate=26)
        assert savings_status(b) == "You're meeting the 25% savings target!"

    def test_below_target(self):
        b = Breakdown(gross_annual=100000, savings_rate=10)
        assert savings_status(b) == "Save 15.0% more to reach 25%"

    def test_progress_capped(self):
        assert savings_progress(Breakdown(gross_annual=1, savings_rate=50)) == 100
        assert savings_progress(Breakdown(gross_annual=1, savings_rate=12.5)) == pytest.approx(50)


class TestLimitText:

    def test_banner_in_progress(self, planner):
        planner.set_gross_salary(100000)
        planner.set_allocation('traditional401k', 10)
        planner.set_allocation('roth401k', 5)
        assert combined_401k_banner(planner) == "401(k): $15,000 of $23,000 (15.0% of salary)"

    def test_banner_reached(self, planner):
        planner.set_gross_salary(100000)
        planner.set_allocation('traditional401k', 23)
        assert combined_401k_banner(planner) == "401(k) limit reached ($23,000)"

    def test_traditional_hint(self, planner):
        planner.set_gross_salary(100000)
        assert limit_hint(planner, 'traditional401k') == "Max: 23.0% ($23,000)"

    def test_hint_without_salary(self, planner):
        assert limit_hint(planner, 'traditional401k') == "Max: $23,000/yr"
        assert limit_hint(planner, 'rothIRA') == "Max: $7,000/yr"

    def test_roth_401k_hint(self, planner):
        assert limit_hint(planner, 'roth401k') == "Shares $23,000 limit with Traditional"

    def test_hsa_hint(self, planner):
        planner.set_gross_salary(100000)
        planner.set_hsa_coverage_type('family')
        assert limit_hint(planner, 'hsa') == "Max: $8,300/yr (8.3% of salary)"

    def test_uncapped_hint_empty(self, planner):
        assert limit_hint(planner, 'emergencyFund') == ""


class TestRenderers:

    def test_registry(self):
        assert set(RENDERER_REGISTRY) == {'Breakdown', 'Dashboard', 'Allocations', 'Limits'}

    def test_breakdown_renderer(self, planner):
        planner.set_gross_salary(100000)
        planner.set_allocation('traditional401k', 10)
        result = render_to_string(BreakdownRenderer(), planner)
        assert "INCOME BREAKDOWN" in result
        assert "PRE-TAX DEDUCTIONS" in result
        assert "POST-TAX DEDUCTIONS" in result
        assert "Traditional 401(k):" in result
        assert "$10,000" in result
        assert "Estimated Taxes (22.0%)" in result
        assert "Take-Home Pay:" in result
        assert "$70,200" in result

    def test_dashboard_renderer(self, planner):
        planner.set_gross_salary(100000)
        result = render_to_string(DashboardRenderer(), planner)
        assert "DASHBOARD" in result
        assert "$6,500" in result
        assert "Save 25.0% more to reach 25%" in result
        assert "WARNING" not in result

    def test_dashboard_warns_on_negative_take_home(self, planner):
        planner.set_gross_salary(60000)
        planner.set_allocation('emergencyFund', 80)
        result = render_to_string(DashboardRenderer(), planner)
        assert "-$100" in result
        assert "WARNING" in result

    def test_allocations_renderer(self, planner):
        planner.set_gross_salary(100000)
        planner.set_allocation('rothIRA', 7)
        result = render_to_string(AllocationsRenderer(), planner)
        assert "Roth IRA" in result
        assert "$7,000" in result
        assert "At IRS limit" in result

    def test_limits_renderer(self, planner):
        result = render_to_string(LimitsRenderer(), planner)
        assert "IRS LIMITS (2024, HSA individual coverage)" in result
        assert "401(k): $0 of $23,000" in result
