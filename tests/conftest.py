"""Pytest configuration for the savings-allocator test suite."""

import os
import sys

import pytest

# Make src/ importable for every test module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from model.AllocationState import AllocationState
from tax.IRSLimits import IRSLimits

# Configure pytest-asyncio so async MCP handler tests run
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )


@pytest.fixture
def limits_2024():
    """IRS limits for 2024."""
    return IRSLimits(tax_year=2024, combined_401k=23000, hsa_individual=4150, hsa_family=8300, roth_ira=7000)


@pytest.fixture
def make_state():
    """Factory for allocation states with a given salary and allocations."""
    def _make(salary: float = 100000, tax_rate: float = 22, premium: float = 0,
              coverage: str = 'individual', **allocations) -> AllocationState:
        state = AllocationState(
            gross_annual_salary=salary,
            effective_tax_rate=tax_rate,
            health_insurance_premium=premium,
            hsa_coverage_type=coverage
        )
        state.allocations.update(allocations)
        return state
    return _make
