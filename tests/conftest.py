"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Keep a developer's .env or shell from changing the tested defaults
for _name in list(os.environ):
    if _name.startswith("COMPOUND_"):
        del os.environ[_name]

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from decimal import Decimal

from compound_calculator import CalculatorSettings, CompoundCalculator


@pytest.fixture
def settings() -> CalculatorSettings:
    """Settings with library defaults, ignoring any .env file."""
    return CalculatorSettings(_env_file=None)


@pytest.fixture
def calc(settings: CalculatorSettings) -> CompoundCalculator:
    """Calculator bound to default settings."""
    return CompoundCalculator(settings)


@pytest.fixture
def base_params() -> dict:
    """Single-day run on a Monday outside any vacation."""
    return {
        "initial_stake": Decimal("1000"),
        "duration_years": 0,
        "duration_months": 0,
        "start_date": "2025-03-03",
    }
