"""Tests for the AllocationPlanner call surface."""

import os
import sys
import logging
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from calc.allocation_planner import AllocationPlanner
from model.AllocationState import AllocationState, DEFAULT_TAX_RATE
from storage.allocation_store import InMemoryAllocationStore, StorageError


class FailingStore(InMemoryAllocationStore):
    """Store whose writes always fail."""

    def save(self, record):
        raise StorageError("disk full")

    def clear(self):
        raise StorageError("read-only")


@pytest.fixture
def store():
    return InMemoryAllocationStore()


@pytest.fixture
def planner(limits_2024, store):
    return AllocationPlanner(AllocationState(), limits_2024, store)


class TestSetters:

    def test_set_gross_salary_parses_formatted_input(self, planner):
        assert planner.set_gross_salary("$85,000") == 85000
        assert planner.state.gross_annual_salary == 85000

    @pytest.mark.parametrize("value", ["-5000", "abc", "", None])
    def test_set_gross_salary_bad_or_negative_is_zero(self, planner, value):
        assert planner.set_gross_salary(value) == 0

    @pytest.mark.parametrize("value,expected", [(30, 30), (75, 50), (-3, 0), ("24.5", 24.5)])
    def test_set_tax_rate_clamped(self, planner, value, expected):
        assert planner.set_tax_rate(value) == expected

    def test_set_premium(self, planner):
        assert planner.set_health_insurance_premium("250") == 250
        assert planner.set_health_insurance_premium(-10) == 0

    def test_set_allocation_returns_applied(self, planner):
        planner.set_gross_salary(100000)
        assert planner.set_allocation('traditional401k', 25) == pytest.approx(23)
        assert planner.state.allocations['traditional401k'] == pytest.approx(23)

    def test_set_allocation_shared_cap(self, planner):
        planner.set_gross_salary(50000)
        planner.set_allocation('traditional401k', 20)
        assert planner.set_allocation('roth401k', 30) == pytest.approx(26)
        assert planner.get_combined_401k_dollars() == pytest.approx(23000)

    def test_set_allocation_unknown_kind(self, planner):
        with pytest.raises(ValueError, match="Unknown allocation 'pension'"):
            planner.set_allocation('pension', 5)

    def test_set_allocation_without_salary_allows_100(self, planner):
        assert planner.set_allocation('traditional401k', 100) == 100

    def test_salary_change_does_not_reclamp(self, planner):
        planner.set_gross_salary(100000)
        planner.set_allocation('traditional401k', 23)
        planner.set_gross_salary(50000)
        assert planner.state.allocations['traditional401k'] == pytest.approx(23)

    def test_coverage_change_reclamps_hsa_only(self, planner):
        planner.set_gross_salary(100000)
        planner.set_hsa_coverage_type('family')
        planner.set_allocation('hsa', 8)
        planner.set_allocation('emergencyFund', 50)
        assert planner.set_hsa_coverage_type('individual') == 'individual'
        assert planner.state.allocations['hsa'] == pytest.approx(4.15)
        assert planner.state.allocations['emergencyFund'] == 50

    def test_coverage_type_normalized(self, planner):
        assert planner.set_hsa_coverage_type(' Family ') == 'family'
        assert planner.get_hsa_limit() == 8300

    def test_coverage_type_invalid(self, planner):
        with pytest.raises(ValueError, match="Unknown HSA coverage type"):
            planner.set_hsa_coverage_type('couple')
        assert planner.state.hsa_coverage_type == 'individual'


class TestPersistence:

    def test_setters_save_record(self, planner, store):
        planner.set_gross_salary(90000)
        planner.set_allocation('rothIRA', 5)
        assert store.record['grossAnnualSalary'] == 90000
        assert store.record['allocations']['rothIRA'] == 5

    def test_reset_restores_defaults_and_clears(self, planner, store):
        planner.set_gross_salary(90000)
        planner.set_tax_rate(30)
        planner.set_allocation('hsa', 2)
        planner.reset()
        assert planner.state.gross_annual_salary == 0
        assert planner.state.effective_tax_rate == DEFAULT_TAX_RATE
        assert planner.state.allocations['hsa'] == 0
        assert store.record is None

    def test_save_failure_keeps_state_and_logs(self, limits_2024, caplog):
        planner = AllocationPlanner(AllocationState(), limits_2024, FailingStore())
        with caplog.at_level(logging.WARNING):
            assert planner.set_gross_salary(70000) == 70000
        assert planner.state.gross_annual_salary == 70000
        assert "Failed to save allocation data" in caplog.text

    def test_clear_failure_still_resets(self, limits_2024, caplog):
        planner = AllocationPlanner(AllocationState(gross_annual_salary=5000), limits_2024, FailingStore())
        with caplog.at_level(logging.WARNING):
            planner.reset()
        assert planner.state.gross_annual_salary == 0
        assert "Failed to clear saved allocation data" in caplog.text

    def test_no_store(self, limits_2024):
        planner = AllocationPlanner(AllocationState(), limits_2024)
        planner.set_gross_salary(1000)
        planner.reset()
        assert planner.state.gross_annual_salary == 0


class TestQueries:

    def test_breakdown_reflects_state(self, planner):
        planner.set_gross_salary(100000)
        assert planner.calculate_breakdown().take_home_annual == pytest.approx(78000)

    def test_limits(self, planner):
        planner.set_gross_salary(100000)
        planner.set_allocation('traditional401k', 23)
        assert planner.is_at_limit('traditional401k')
        assert planner.get_max_percent('roth401k') == pytest.approx(0, abs=1e-9)
        assert planner.get_dollar_limit('hsa') == 4150
        assert planner.get_combined_401k_percent() == pytest.approx(23)
