from dataclasses import dataclass, field
from typing import Dict


@dataclass
class Breakdown:
    """Tax waterfall for one allocation state.

    Every amount is annual dollars unless the name says monthly. Derived on
    demand by `calc.breakdown_calculator.calculate_breakdown`; never persisted.
    """
    gross_annual: float = 0.0
    gross_monthly: float = 0.0

    # Pre-tax deductions (traditional401k, hsa, healthInsurance)
    pre_tax_deductions: Dict[str, float] = field(default_factory=dict)
    total_pre_tax_annual: float = 0.0

    taxable_income: float = 0.0  # Never negative
    estimated_taxes: float = 0.0
    after_tax_income: float = 0.0

    # Post-tax deductions (roth401k, rothIRA, emergencyFund, taxableBrokerage)
    post_tax_deductions: Dict[str, float] = field(default_factory=dict)
    total_post_tax_annual: float = 0.0

    take_home_annual: float = 0.0  # May be negative
    take_home_monthly: float = 0.0

    total_savings_annual: float = 0.0
    savings_rate: float = 0.0  # Percent of gross

    def monthly(self, field_name: str) -> float:
        """Return an annual scalar field divided by 12."""
        return getattr(self, field_name) / 12
