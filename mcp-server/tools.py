"""Savings Allocator Tools for MCP Server.

This module provides the tool implementations that wrap the allocation
planner and expose its data through MCP.
"""

import os
import sys
from typing import Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tax.IRSLimits import load_irs_limits
from calc.allocation_planner import AllocationPlanner
from calc.breakdown_calculator import calculate_bar_shares
from calc.conversions import percent_to_dollars
from model.AllocationState import ALLOCATION_KINDS
from storage.allocation_store import JsonFileAllocationStore, load_state


class SavingsAllocatorTools:
    """Tools that wrap the allocation planner for MCP access."""

    def __init__(self, data_dir: str, tax_year: Optional[int] = None):
        """Initialize with the data directory and load the saved allocation.

        Args:
            data_dir: Directory holding the saved allocation record
            tax_year: Tax year of IRS limits; defaults to the reference default
        """
        self.data_dir = data_dir
        self.store = JsonFileAllocationStore(data_dir)
        self.limits = load_irs_limits(tax_year)
        self.planner = AllocationPlanner(load_state(self.store), self.limits, self.store)

    def _allocation_summary(self, kind: str) -> dict:
        state = self.planner.state
        percent = state.allocations.get(kind, 0.0)
        dollars = percent_to_dollars(state, percent)
        return {
            "percent": round(percent, 2),
            "annual": round(dollars, 2),
            "monthly": round(dollars / 12, 2),
            "max_percent": round(self.planner.get_max_percent(kind), 2),
            "at_irs_limit": self.planner.is_at_limit(kind)
        }

    def get_allocation_state(self) -> dict:
        """Get the current inputs."""
        result = self.planner.state.to_record()
        result["irs_tax_year"] = self.limits.tax_year
        return result

    def set_gross_salary(self, dollars) -> dict:
        salary = self.planner.set_gross_salary(dollars)
        return {"gross_annual_salary": salary, "gross_monthly_salary": round(salary / 12, 2)}

    def set_tax_rate(self, percent) -> dict:
        return {"effective_tax_rate": self.planner.set_tax_rate(percent)}

    def set_health_insurance_premium(self, dollars) -> dict:
        return {"health_insurance_premium_monthly": self.planner.set_health_insurance_premium(dollars)}

    def set_hsa_coverage_type(self, coverage_type: str) -> dict:
        coverage = self.planner.set_hsa_coverage_type(coverage_type)
        return {
            "hsa_coverage_type": coverage,
            "hsa_limit": self.planner.get_hsa_limit(),
            "hsa_allocation_percent": round(self.planner.state.allocations['hsa'], 2)
        }

    def set_allocation(self, kind: str, percent) -> dict:
        """Set an allocation and report whether it was limited."""
        applied = self.planner.set_allocation(kind, percent)
        result = {"allocation": kind, "requested_percent": percent, "applied_percent": round(applied, 4)}
        result.update(self._allocation_summary(kind))
        return result

    def get_breakdown(self) -> dict:
        """Get the full gross-to-take-home breakdown."""
        b = self.planner.calculate_breakdown()
        return {
            "gross": {
                "annual": round(b.gross_annual, 2),
                "monthly": round(b.gross_monthly, 2)
            },
            "pre_tax_deductions": {k: round(v, 2) for k, v in b.pre_tax_deductions.items()},
            "total_pre_tax_annual": round(b.total_pre_tax_annual, 2),
            "taxable_income": round(b.taxable_income, 2),
            "estimated_taxes": round(b.estimated_taxes, 2),
            "after_tax_income": round(b.after_tax_income, 2),
            "post_tax_deductions": {k: round(v, 2) for k, v in b.post_tax_deductions.items()},
            "total_post_tax_annual": round(b.total_post_tax_annual, 2),
            "take_home": {
                "annual": round(b.take_home_annual, 2),
                "monthly": round(b.take_home_monthly, 2)
            },
            "total_savings_annual": round(b.total_savings_annual, 2),
            "savings_rate": round(b.savings_rate, 2),
            "bar_shares": {k: round(v, 2) for k, v in calculate_bar_shares(b).items()}
        }

    def get_limits(self) -> dict:
        """Get IRS caps and each allocation's current ceiling."""
        cap = self.limits.combined_401k
        combined = self.planner.get_combined_401k_dollars()
        return {
            "tax_year": self.limits.tax_year,
            "irs_limits": self.limits.to_dict(),
            "hsa_coverage_type": self.planner.state.hsa_coverage_type,
            "hsa_limit": self.planner.get_hsa_limit(),
            "combined_401k": {
                "percent": round(self.planner.get_combined_401k_percent(), 2),
                "dollars": round(combined, 2),
                "remaining": round(max(0.0, cap - combined), 2),
                "limit_reached": cap - combined <= 0
            },
            "allocations": {kind: self._allocation_summary(kind) for kind in ALLOCATION_KINDS}
        }

    def reset_allocations(self) -> dict:
        self.planner.reset()
        return {"message": "All data reset to defaults.", "state": self.planner.state.to_record()}
