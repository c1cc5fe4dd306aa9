"""Renderer classes for displaying allocation results.

This module contains renderer classes that handle the presentation logic
for the savings allocator. Each renderer takes the `AllocationPlanner` and
pulls the breakdown and limit figures it needs; none of them change state.
"""

import math
from abc import ABC, abstractmethod
from typing import Dict, Optional

from calc.allocation_planner import AllocationPlanner
from calc.breakdown_calculator import calculate_bar_shares
from calc.conversions import dollars_to_percent, percent_to_dollars
from model.AllocationState import ALLOCATION_KINDS
from model.Breakdown import Breakdown
from model.field_metadata import get_label


# Savings rate the dashboard measures progress against (percent of gross)
SAVINGS_RATE_TARGET = 25.0

# Width of the waterfall bar in characters
BAR_WIDTH = 50


def format_currency(value: Optional[float]) -> str:
    """Format dollars rounded to whole dollars, e.g. $1,234 or -$1,234."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "$0"
    formatted = f"${abs(value):,.0f}"
    # Avoid "-$0" for tiny negative values that round away
    if value < 0 and formatted != "$0":
        return "-" + formatted
    return formatted


def format_percent(value: float) -> str:
    """Format a percent with one decimal, e.g. 12.5%."""
    return f"{value:.1f}%"


def savings_status(breakdown: Breakdown, target: float = SAVINGS_RATE_TARGET) -> str:
    """Return the dashboard status line for the savings rate."""
    if breakdown.gross_annual <= 0:
        return "Enter your income to get started"
    if breakdown.savings_rate >= target:
        return f"You're meeting the {target:g}% savings target!"
    needed = target - breakdown.savings_rate
    return f"Save {needed:.1f}% more to reach {target:g}%"


def savings_progress(breakdown: Breakdown, target: float = SAVINGS_RATE_TARGET) -> float:
    """Return progress toward the savings target as a percent capped at 100."""
    return min((breakdown.savings_rate / target) * 100, 100.0)


def combined_401k_banner(planner: AllocationPlanner) -> str:
    """Return the shared 401(k) cap banner text."""
    cap = planner.limits.combined_401k
    combined = planner.get_combined_401k_dollars()
    if cap - combined <= 0:
        return f"401(k) limit reached ({format_currency(cap)})"
    combined_percent = planner.get_combined_401k_percent()
    return f"401(k): {format_currency(combined)} of {format_currency(cap)} ({combined_percent:.1f}% of salary)"


def limit_hint(planner: AllocationPlanner, kind: str) -> str:
    """Return the 'Max: ...' hint shown next to a capped allocation."""
    state = planner.state
    limits = planner.limits
    if kind == 'traditional401k':
        return _cap_hint(planner, limits.combined_401k)
    if kind == 'roth401k':
        return f"Shares {format_currency(limits.combined_401k)} limit with Traditional"
    if kind == 'hsa':
        hsa_limit = planner.get_hsa_limit()
        return f"Max: {format_currency(hsa_limit)}/yr ({dollars_to_percent(state, hsa_limit):.1f}% of salary)"
    if kind == 'rothIRA':
        return _cap_hint(planner, limits.roth_ira)
    return ""


def _cap_hint(planner: AllocationPlanner, cap: float) -> str:
    if planner.state.gross_annual_salary > 0:
        cap_percent = min(100.0, dollars_to_percent(planner.state, cap))
        return f"Max: {cap_percent:.1f}% ({format_currency(cap)})"
    return f"Max: {format_currency(cap)}/yr"


def format_bar(shares: Dict[str, float], width: int = BAR_WIDTH) -> str:
    """Draw the waterfall shares as a fixed-width text bar.

    P = pre-tax, T = taxes, R = post-tax, H = take-home.
    """
    symbols = (('pre_tax', 'P'), ('taxes', 'T'), ('post_tax', 'R'), ('take_home', 'H'))
    bar = ""
    for key, symbol in symbols:
        bar += symbol * int(round(shares.get(key, 0.0) / 100 * width))
    return "[" + bar[:width].ljust(width, '.') + "]"


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, planner: AllocationPlanner) -> None:
        """Render the data to output.

        Args:
            planner: The AllocationPlanner holding the current state
        """
        pass


class BreakdownRenderer(BaseRenderer):
    """Renderer for the gross-to-take-home waterfall."""

    def _row(self, label: str, annual: float, negate: bool = False) -> None:
        prefix = "-" if negate else ""
        annual_text = prefix + format_currency(annual)
        monthly_text = prefix + format_currency(annual / 12)
        print(f"  {label:<32} {annual_text:>14} {monthly_text:>14}")

    def render(self, planner: AllocationPlanner) -> None:
        """Render the breakdown with annual and monthly columns.

        Args:
            planner: AllocationPlanner holding the current state
        """
        b = planner.calculate_breakdown()

        print()
        print("=" * 64)
        print(f"{'INCOME BREAKDOWN':^64}")
        print("=" * 64)
        print(f"  {'':<32} {'Annual':>14} {'Monthly':>14}")
        self._row("Gross Salary:", b.gross_annual)

        print()
        print("-" * 64)
        print("PRE-TAX DEDUCTIONS")
        print("-" * 64)
        for key, amount in b.pre_tax_deductions.items():
            self._row(f"{get_label(key)}:", amount)
        print(f"  {'-' * 60}")
        self._row("Total Pre-Tax:", b.total_pre_tax_annual, negate=True)

        print()
        self._row("Taxable Income:", b.taxable_income)
        rate = format_percent(planner.state.effective_tax_rate)
        self._row(f"Estimated Taxes ({rate}):", b.estimated_taxes, negate=True)
        self._row("After-Tax Income:", b.after_tax_income)

        print()
        print("-" * 64)
        print("POST-TAX DEDUCTIONS")
        print("-" * 64)
        for key, amount in b.post_tax_deductions.items():
            self._row(f"{get_label(key)}:", amount)
        print(f"  {'-' * 60}")
        self._row("Total Post-Tax:", b.total_post_tax_annual, negate=True)

        print()
        print("=" * 64)
        self._row("Take-Home Pay:", b.take_home_annual)
        print("=" * 64)
        print(f"  {format_bar(calculate_bar_shares(b))}")
        print("  P=pre-tax  T=taxes  R=post-tax  H=take-home")
        print()


class DashboardRenderer(BaseRenderer):
    """Renderer for the headline take-home and savings rate figures."""

    def render(self, planner: AllocationPlanner) -> None:
        b = planner.calculate_breakdown()

        print()
        print("=" * 64)
        print(f"{'DASHBOARD':^64}")
        print("=" * 64)
        print(f"  {'Monthly Take-Home:':<32} {format_currency(b.take_home_monthly):>14}")
        print(f"  {'Annual Take-Home:':<32} {format_currency(b.take_home_annual):>14}")
        print(f"  {'Savings Rate:':<32} {format_percent(b.savings_rate):>14}")
        print(f"  {'Total Saved per Year:':<32} {format_currency(b.total_savings_annual):>14}")

        progress = savings_progress(b)
        filled = int(round(progress / 100 * BAR_WIDTH))
        print(f"  [{'#' * filled}{'.' * (BAR_WIDTH - filled)}] {progress:.0f}% of {SAVINGS_RATE_TARGET:g}% target")
        print(f"  {savings_status(b)}")
        if b.take_home_monthly < 0:
            print("  WARNING: allocations exceed after-tax income; take-home pay is negative")
        print()


class AllocationsRenderer(BaseRenderer):
    """Renderer for the per-account allocation table."""

    def render(self, planner: AllocationPlanner) -> None:
        state = planner.state

        header = f"  {'Account':<20} {'Percent':>8} {'Annual':>12} {'Monthly':>10} {'Max %':>8}  Status"
        print()
        print(header)
        print("  " + "-" * (len(header) - 2))
        for kind in ALLOCATION_KINDS:
            percent = state.allocations.get(kind, 0.0)
            annual = percent_to_dollars(state, percent)
            status = "At IRS limit" if planner.is_at_limit(kind) else ""
            print(f"  {get_label(kind):<20} {format_percent(percent):>8} {format_currency(annual):>12} "
                  f"{format_currency(annual / 12):>10} {format_percent(planner.get_max_percent(kind)):>8}  {status}")
        print()


class LimitsRenderer(BaseRenderer):
    """Renderer for IRS contribution limit banners."""

    def render(self, planner: AllocationPlanner) -> None:
        print()
        print("-" * 64)
        print(f"IRS LIMITS ({planner.limits.tax_year}, HSA {planner.state.hsa_coverage_type} coverage)")
        print("-" * 64)
        print(f"  {combined_401k_banner(planner)}")
        for kind in ('traditional401k', 'roth401k', 'hsa', 'rothIRA'):
            print(f"  {get_label(kind) + ':':<20} {limit_hint(planner, kind)}")
        print()


# Registry of available renderers, keyed by render mode
RENDERER_REGISTRY = {
    'Breakdown': BreakdownRenderer,
    'Dashboard': DashboardRenderer,
    'Allocations': AllocationsRenderer,
    'Limits': LimitsRenderer,
}
