from typing import Optional

from model.AllocationState import AllocationState
from tax.IRSLimits import IRSLimits
from calc.conversions import percent_to_dollars, dollars_to_percent


class LimitEngine:
    """Translates requested allocation percents into IRS-compliant ones.

    Pass a hydrated `IRSLimits` into the constructor. Every method takes the
    allocation state explicitly and only reads it, except
    `refresh_hsa_limit`, which is the one narrow re-clamp path.

    Traditional and Roth 401(k) share a single annual dollar cap, so raising
    one lowers the other's ceiling. Each ceiling is computed from the other
    kind's current value, never its own.
    """

    def __init__(self, limits: IRSLimits):
        self.limits = limits

    def get_hsa_limit(self, state: AllocationState) -> float:
        """Return the HSA dollar cap for the state's coverage type."""
        return self.limits.hsa_limit(state.hsa_coverage_type)

    def get_max_percent(self, state: AllocationState, kind: str) -> float:
        """Return the highest percent of gross `kind` may take, in [0, 100].

        Without a salary there is nothing to derive a limit from, so every
        kind returns 100. Kinds without an IRS cap also return 100.
        """
        if state.gross_annual_salary <= 0:
            return 100.0

        if kind == 'traditional401k':
            roth_401k_dollars = percent_to_dollars(state, state.allocations.get('roth401k', 0.0))
            remaining = self.limits.combined_401k - roth_401k_dollars
            return min(100.0, dollars_to_percent(state, max(0.0, remaining)))
        if kind == 'roth401k':
            traditional_401k_dollars = percent_to_dollars(state, state.allocations.get('traditional401k', 0.0))
            remaining = self.limits.combined_401k - traditional_401k_dollars
            return min(100.0, dollars_to_percent(state, max(0.0, remaining)))
        if kind == 'hsa':
            return min(100.0, dollars_to_percent(state, self.get_hsa_limit(state)))
        if kind == 'rothIRA':
            return min(100.0, dollars_to_percent(state, self.limits.roth_ira))
        return 100.0

    def enforce_limit(self, state: AllocationState, kind: str, percent: float) -> float:
        """Clamp a requested percent to [0, min(100, get_max_percent(kind))]."""
        percent = max(0.0, min(100.0, percent))
        return min(percent, self.get_max_percent(state, kind))

    def get_combined_401k_percent(self, state: AllocationState) -> float:
        return state.allocations.get('traditional401k', 0.0) + state.allocations.get('roth401k', 0.0)

    def get_combined_401k_dollars(self, state: AllocationState) -> float:
        return percent_to_dollars(state, self.get_combined_401k_percent(state))

    def get_dollar_limit(self, state: AllocationState, kind: str) -> Optional[float]:
        """Return the IRS dollar cap that applies to `kind`, or None if uncapped.

        Both 401(k) kinds report the combined cap.
        """
        if kind in ('traditional401k', 'roth401k'):
            return self.limits.combined_401k
        if kind == 'hsa':
            return self.get_hsa_limit(state)
        if kind == 'rothIRA':
            return self.limits.roth_ira
        return None

    def is_at_limit(self, state: AllocationState, kind: str) -> bool:
        """True when the kind's own dollars are within $1 of its dollar cap.

        A 401(k) kind compares only its own dollars against the combined cap;
        use `get_combined_401k_dollars` for the shared total.
        """
        limit = self.get_dollar_limit(state, kind)
        if not limit:
            return False
        dollars = percent_to_dollars(state, state.allocations.get(kind, 0.0))
        return dollars >= limit - 1

    def refresh_hsa_limit(self, state: AllocationState) -> bool:
        """Lower the HSA allocation to its current ceiling if it exceeds it.

        Called after the HSA coverage type changes. No other allocation is
        re-clamped, and nothing is re-clamped on a salary change.

        Returns:
            True if the HSA allocation was lowered.
        """
        max_percent = self.get_max_percent(state, 'hsa')
        if state.allocations.get('hsa', 0.0) > max_percent:
            state.allocations['hsa'] = max_percent
            return True
        return False
