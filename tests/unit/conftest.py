"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Referral topology with L1, L2 and orphan L2 partners
- Resolved step context
- Log capture for loguru
"""

from decimal import Decimal

import pytest
from loguru import logger

from compound_calculator.core.calculator import resolve_params


@pytest.fixture
def partners() -> list[dict]:
    """
    L1 partner "a" with L2 "b" beneath it, plus orphan L2 "c".

    Stakes:
    - a: 1500 (profit share 0.30, commission 0.50/0.25)
    - b: 2000 (profit share 0.30, commission 0.50/0.25)
    - c: 500 (profit share 0.20, commission 1.00/0.50)
    """
    return [
        {"id": "a", "name": "Anna", "level": "L1", "initial_stake": Decimal("1500")},
        {
            "id": "b",
            "name": "Ben",
            "level": "L2",
            "initial_stake": Decimal("2000"),
            "parent_l1_id": "a",
        },
        {"id": "c", "name": "Cleo", "level": "L2", "initial_stake": Decimal("500")},
    ]


@pytest.fixture
def resolved(settings, base_params, partners):
    """Resolved run with the partner topology."""
    return resolve_params({**base_params, "partners": partners}, settings)


@pytest.fixture
def log_messages():
    """
    Capture loguru messages.

    Returns:
        list[str]: Messages logged while the test runs
    """
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
