from typing import Dict

from model.AllocationState import AllocationState, ALLOCATION_KINDS
from model.Breakdown import Breakdown
from calc.conversions import percent_to_dollars


def calculate_breakdown(state: AllocationState) -> Breakdown:
    """Compute the tax waterfall for an allocation state.

    Pre-tax deductions (traditional 401(k), HSA, health insurance) come off
    gross before the flat effective tax rate is applied; post-tax deductions
    (Roth 401(k), Roth IRA, emergency fund, taxable brokerage) come off
    after-tax income. Take-home pay is reported as computed and can be
    negative when post-tax allocations exceed after-tax income.

    Args:
        state: The allocation state. It is only read.

    Returns:
        A Breakdown snapshot.
    """
    gross_annual = state.gross_annual_salary
    gross_monthly = gross_annual / 12

    dollars = {kind: percent_to_dollars(state, state.allocations.get(kind, 0.0)) for kind in ALLOCATION_KINDS}

    pre_tax_deductions = {
        'traditional401k': dollars['traditional401k'],
        'hsa': dollars['hsa'],
        'healthInsurance': state.health_insurance_premium * 12
    }
    total_pre_tax_annual = sum(pre_tax_deductions.values())

    taxable_income = max(0.0, gross_annual - total_pre_tax_annual)
    estimated_taxes = taxable_income * (state.effective_tax_rate / 100)
    after_tax_income = taxable_income - estimated_taxes

    post_tax_deductions = {
        'roth401k': dollars['roth401k'],
        'rothIRA': dollars['rothIRA'],
        'emergencyFund': dollars['emergencyFund'],
        'taxableBrokerage': dollars['taxableBrokerage']
    }
    total_post_tax_annual = sum(post_tax_deductions.values())

    take_home_annual = after_tax_income - total_post_tax_annual
    take_home_monthly = take_home_annual / 12

    total_savings_annual = sum(dollars.values())
    savings_rate = (total_savings_annual / gross_annual) * 100 if gross_annual > 0 else 0.0

    return Breakdown(
        gross_annual=gross_annual,
        gross_monthly=gross_monthly,
        pre_tax_deductions=pre_tax_deductions,
        total_pre_tax_annual=total_pre_tax_annual,
        taxable_income=taxable_income,
        estimated_taxes=estimated_taxes,
        after_tax_income=after_tax_income,
        post_tax_deductions=post_tax_deductions,
        total_post_tax_annual=total_post_tax_annual,
        take_home_annual=take_home_annual,
        take_home_monthly=take_home_monthly,
        total_savings_annual=total_savings_annual,
        savings_rate=savings_rate
    )


def calculate_bar_shares(breakdown: Breakdown) -> Dict[str, float]:
    """Split gross into waterfall bar widths, each a percent of gross.

    The take-home share is floored at 0 for display; the breakdown itself is
    left untouched. Without a gross salary every share is 0.
    """
    total = breakdown.gross_annual
    if total <= 0:
        return {'pre_tax': 0.0, 'taxes': 0.0, 'post_tax': 0.0, 'take_home': 0.0}

    return {
        'pre_tax': (breakdown.total_pre_tax_annual / total) * 100,
        'taxes': (breakdown.estimated_taxes / total) * 100,
        'post_tax': (breakdown.total_post_tax_annual / total) * 100,
        'take_home': max(0.0, (breakdown.take_home_annual / total) * 100)
    }
