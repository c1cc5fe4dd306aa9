"""Field metadata for Breakdown fields.

This module provides descriptions and short names for the scalar Breakdown
fields, plus display labels for the allocation kinds. Short names are used as
column headers and by the shell 'get' command.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping Breakdown field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Gross
    "gross_annual": FieldInfo("Gross Annual", "Gross annual salary before any deductions"),
    "gross_monthly": FieldInfo("Gross Monthly", "Gross salary per month"),

    # Pre-tax
    "total_pre_tax_annual": FieldInfo("Pre-Tax", "Traditional 401(k), HSA and health insurance premiums"),
    "taxable_income": FieldInfo("Taxable Income", "Gross minus pre-tax deductions, never below zero"),
    "estimated_taxes": FieldInfo("Est. Taxes", "Taxable income times the effective tax rate"),
    "after_tax_income": FieldInfo("After-Tax", "Taxable income after estimated taxes"),

    # Post-tax
    "total_post_tax_annual": FieldInfo("Post-Tax", "Roth 401(k), Roth IRA, emergency fund and brokerage"),

    # Take home
    "take_home_annual": FieldInfo("Take Home", "Annual pay left after taxes and all allocations (may be negative)"),
    "take_home_monthly": FieldInfo("Take Home/mo", "Monthly pay left after taxes and all allocations"),

    # Savings
    "total_savings_annual": FieldInfo("Total Savings", "Sum of all six allocations in dollars"),
    "savings_rate": FieldInfo("Savings Rate", "Total savings as a percent of gross salary"),
}


# Display labels for allocation kinds
ALLOCATION_LABELS: Dict[str, str] = {
    "traditional401k": "Traditional 401(k)",
    "roth401k": "Roth 401(k)",
    "hsa": "HSA",
    "rothIRA": "Roth IRA",
    "emergencyFund": "Emergency Fund",
    "taxableBrokerage": "Taxable Brokerage",
    "healthInsurance": "Health Insurance",
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def get_label(kind: str) -> str:
    """Get the display label for an allocation kind, or the kind itself."""
    return ALLOCATION_LABELS.get(kind, kind)
