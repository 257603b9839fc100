# fsqca/exceptions.py
"""
Error types for the fsQCA pipeline.

Every error here is fatal for the current run: a truth table built from
partially calibrated data is meaningless, so the pipeline never tries to
continue after one of them.
"""

from typing import Any, Dict, List, Optional


class FsqcaError(Exception):
    """Base exception for all fsQCA pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context or {}
        self.suggestions: List[str] = suggestions or []

    def add_context(self, key: str, value: Any) -> "FsqcaError":
        if key:
            self.context[key] = value
        return self

    def add_suggestion(self, suggestion: str) -> "FsqcaError":
        if suggestion:
            self.suggestions.append(suggestion)
        return self

    def __str__(self) -> str:
        base = self.message or ""
        if self.suggestions:
            return f"{base} -- Suggestions: {'; '.join(self.suggestions)}"
        return base


class ConfigurationError(FsqcaError):
    """Malformed analysis configuration (thresholds, cutoffs, condition list)."""

    def __init__(self, message: str, *, config_field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_field = config_field

    def __str__(self) -> str:
        base = self.message or ""
        if self.config_field:
            base = f"[{self.config_field}] {base}"
        if self.suggestions:
            return f"{base} -- Suggestions: {'; '.join(self.suggestions)}"
        return base


class MissingCalibrationError(ConfigurationError):
    """A condition (or the outcome) has no threshold triplet configured."""


class AmbiguousMembershipError(FsqcaError):
    """A calibrated condition membership is exactly 0.5."""


class ConditionExplosionError(FsqcaError):
    """Too many conditions to enumerate every truth table corner."""


class DataShapeError(FsqcaError):
    """Input table does not have the shape the analysis needs."""


__all__ = [
    "FsqcaError",
    "ConfigurationError",
    "MissingCalibrationError",
    "AmbiguousMembershipError",
    "ConditionExplosionError",
    "DataShapeError",
]
