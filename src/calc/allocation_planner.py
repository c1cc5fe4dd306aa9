import logging
from typing import Optional

from model.AllocationState import (
    AllocationState,
    ALLOCATION_KINDS,
    HSA_COVERAGE_TYPES,
    MAX_TAX_RATE,
)
from model.Breakdown import Breakdown
from tax.IRSLimits import IRSLimits
from calc.conversions import parse_number
from calc.limit_engine import LimitEngine
from calc.breakdown_calculator import calculate_breakdown
from storage.allocation_store import AllocationStore, StorageError


logger = logging.getLogger(__name__)


class AllocationPlanner:
    """Call surface used by the shell and the MCP tools.

    Wraps one `AllocationState` together with a `LimitEngine`. Setters clamp
    their input, mutate the state in place and then save it to the injected
    store. Saving is best-effort: a `StorageError` is logged and the state
    simply stays in memory.
    """

    def __init__(self, state: AllocationState, limits: IRSLimits,
                 store: Optional[AllocationStore] = None):
        self.state = state
        self.limits = limits
        self.limit_engine = LimitEngine(limits)
        self.store = store

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.state.to_record())
        except StorageError as e:
            logger.warning("Failed to save allocation data: %s", e)

    # ====== SETTERS ======

    def set_gross_salary(self, dollars) -> float:
        """Set gross annual salary (dollars). Negative input is stored as 0.

        Existing allocation percents are not re-clamped against the new
        salary.
        """
        self.state.gross_annual_salary = max(0.0, parse_number(dollars))
        self._persist()
        return self.state.gross_annual_salary

    def set_tax_rate(self, percent) -> float:
        """Set the effective tax rate, clamped to [0, 50]."""
        self.state.effective_tax_rate = min(MAX_TAX_RATE, max(0.0, parse_number(percent)))
        self._persist()
        return self.state.effective_tax_rate

    def set_health_insurance_premium(self, dollars) -> float:
        """Set the monthly health insurance premium. Negative input is stored as 0."""
        self.state.health_insurance_premium = max(0.0, parse_number(dollars))
        self._persist()
        return self.state.health_insurance_premium

    def set_hsa_coverage_type(self, coverage_type: str) -> str:
        """Set HSA coverage and re-clamp the HSA allocation to the new cap.

        Raises:
            ValueError: If coverage_type is not 'individual' or 'family'.
        """
        normalized = str(coverage_type).strip().lower()
        if normalized not in HSA_COVERAGE_TYPES:
            raise ValueError(f"Unknown HSA coverage type '{coverage_type}'. Use one of: {', '.join(HSA_COVERAGE_TYPES)}")
        self.state.hsa_coverage_type = normalized
        if self.limit_engine.refresh_hsa_limit(self.state):
            logger.info("HSA allocation lowered to %.2f%% for %s coverage",
                        self.state.allocations['hsa'], normalized)
        self._persist()
        return normalized

    def set_allocation(self, kind: str, requested_percent) -> float:
        """Clamp and store an allocation percent.

        Returns:
            The applied percent, which may be lower than requested.

        Raises:
            ValueError: If kind is not a known allocation kind.
        """
        if kind not in ALLOCATION_KINDS:
            raise ValueError(f"Unknown allocation '{kind}'. Use one of: {', '.join(ALLOCATION_KINDS)}")
        applied = self.limit_engine.enforce_limit(self.state, kind, parse_number(requested_percent))
        self.state.allocations[kind] = applied
        self._persist()
        return applied

    def reset(self) -> None:
        """Restore defaults and remove the saved record."""
        self.state.reset()
        if self.store is None:
            return
        try:
            self.store.clear()
        except StorageError as e:
            logger.warning("Failed to clear saved allocation data: %s", e)

    # ====== QUERIES ======

    def get_max_percent(self, kind: str) -> float:
        return self.limit_engine.get_max_percent(self.state, kind)

    def get_hsa_limit(self) -> float:
        return self.limit_engine.get_hsa_limit(self.state)

    def get_combined_401k_percent(self) -> float:
        return self.limit_engine.get_combined_401k_percent(self.state)

    def get_combined_401k_dollars(self) -> float:
        return self.limit_engine.get_combined_401k_dollars(self.state)

    def get_dollar_limit(self, kind: str) -> Optional[float]:
        return self.limit_engine.get_dollar_limit(self.state, kind)

    def is_at_limit(self, kind: str) -> bool:
        return self.limit_engine.is_at_limit(self.state, kind)

    def calculate_breakdown(self) -> Breakdown:
        return calculate_breakdown(self.state)
