"""Allocation state for the savings allocator.

The state is a single mutable record owned by the application shell and
passed explicitly into every calculation. Persisted records use the
camelCase keys listed in `to_record`.
"""

from dataclasses import dataclass, field
from typing import Dict


# Allocation kinds in display order
ALLOCATION_KINDS = (
    'traditional401k',
    'roth401k',
    'hsa',
    'rothIRA',
    'emergencyFund',
    'taxableBrokerage',
)

PRE_TAX_KINDS = ('traditional401k', 'hsa')
POST_TAX_KINDS = ('roth401k', 'rothIRA', 'emergencyFund', 'taxableBrokerage')

HSA_COVERAGE_TYPES = ('individual', 'family')

DEFAULT_TAX_RATE = 22.0
MAX_TAX_RATE = 50.0


def default_allocations() -> Dict[str, float]:
    """Return a fresh allocations mapping with every kind at 0%."""
    return {kind: 0.0 for kind in ALLOCATION_KINDS}


@dataclass
class AllocationState:
    """Salary, tax inputs and allocation percentages for one user.

    All allocation values are percents of gross annual salary.
    """
    gross_annual_salary: float = 0.0  # dollars/year
    effective_tax_rate: float = DEFAULT_TAX_RATE  # percent, 0-50
    health_insurance_premium: float = 0.0  # dollars/month
    hsa_coverage_type: str = 'individual'
    allocations: Dict[str, float] = field(default_factory=default_allocations)

    def reset(self) -> None:
        """Restore every field to its default in place."""
        defaults = AllocationState()
        self.gross_annual_salary = defaults.gross_annual_salary
        self.effective_tax_rate = defaults.effective_tax_rate
        self.health_insurance_premium = defaults.health_insurance_premium
        self.hsa_coverage_type = defaults.hsa_coverage_type
        self.allocations = defaults.allocations

    def to_record(self) -> dict:
        """Serialize to the persisted record layout."""
        return {
            'grossAnnualSalary': self.gross_annual_salary,
            'effectiveTaxRate': self.effective_tax_rate,
            'healthInsurancePremium': self.health_insurance_premium,
            'hsaCoverageType': self.hsa_coverage_type,
            'allocations': {kind: self.allocations.get(kind, 0.0) for kind in ALLOCATION_KINDS}
        }

    @classmethod
    def from_record(cls, record) -> 'AllocationState':
        """Build a state from a persisted record, filling gaps from defaults.

        Fields absent from the record take their default value, and the
        `allocations` mapping is merged key by key with the default
        allocations so records saved before a kind existed still load.
        Unknown allocation keys are dropped. Values are not re-clamped.

        Raises:
            ValueError: If the record is not a mapping or holds values that
                cannot be read as the declared types.
        """
        if not isinstance(record, dict):
            raise ValueError(f"Allocation record must be an object, got {type(record).__name__}")

        state = cls()
        try:
            if 'grossAnnualSalary' in record:
                state.gross_annual_salary = _to_float(record['grossAnnualSalary'])
            if 'effectiveTaxRate' in record:
                state.effective_tax_rate = _to_float(record['effectiveTaxRate'])
            if 'healthInsurancePremium' in record:
                state.health_insurance_premium = _to_float(record['healthInsurancePremium'])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid numeric field in allocation record: {e}") from e

        coverage = record.get('hsaCoverageType', state.hsa_coverage_type)
        if coverage not in HSA_COVERAGE_TYPES:
            raise ValueError(f"Invalid hsaCoverageType in allocation record: {coverage!r}")
        state.hsa_coverage_type = coverage

        saved_allocations = record.get('allocations') or {}
        if not isinstance(saved_allocations, dict):
            raise ValueError("Allocation record 'allocations' must be an object")
        for kind in ALLOCATION_KINDS:
            if kind in saved_allocations:
                try:
                    state.allocations[kind] = _to_float(saved_allocations[kind])
                except (TypeError, ValueError) as e:
                    raise ValueError(f"Invalid allocation for {kind}: {e}") from e
        return state


def _to_float(value) -> float:
    # bool is an int subclass; a stored true/false is not a number
    if isinstance(value, bool) or value is None:
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)
