"""
Exception types raised by the forecasting engine.
"""

from __future__ import annotations


class ForecastError(ValueError):
    """Base class for forecasting input errors."""


class InvalidRuleError(ForecastError):
    """A recurring rule is missing its anchor or its anchor fields disagree."""

    def __init__(self, message: str, *, rule=None) -> None:
        super().__init__(message)
        self.rule = rule
