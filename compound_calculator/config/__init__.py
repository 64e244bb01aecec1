"""
Calculator configuration.

Settings are loaded from environment variables and ``.env`` files.
"""

from compound_calculator.config.logging import setup_logging
from compound_calculator.config.settings import CalculatorSettings, get_settings, settings

__all__ = [
    "CalculatorSettings",
    "get_settings",
    "settings",
    "setup_logging",
]
