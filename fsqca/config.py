# fsqca/config.py
"""
Analysis configuration.

One ``AnalysisConfig`` object carries every threshold and cutoff of a run
and is passed explicitly to each pipeline stage. Nothing here falls back to
package-level defaults for the analytical choices: inclusion cutoffs,
coverage cutoffs and every calibration triplet must come from the caller.
"""

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CALIBRATION_METHODS = ("logistic", "linear")


def _check_unit_interval(value, config_field: str) -> None:
    if value is None or not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
        raise ConfigurationError(
            f"must be a number in [0, 1], got {value!r}",
            config_field=config_field,
        )


@dataclass(frozen=True)
class ThresholdTriplet:
    """Calibration anchors: full non-membership, crossover, full membership."""

    exclusion: float
    crossover: float
    inclusion: float

    def __post_init__(self):
        values = (self.exclusion, self.crossover, self.inclusion)
        for v in values:
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                raise ConfigurationError(
                    f"Threshold anchors must be finite numbers, got {values!r}"
                )
        if not (self.exclusion < self.crossover < self.inclusion):
            raise ConfigurationError(
                f"Threshold anchors must satisfy exclusion < crossover < inclusion, got {values!r}"
            ).add_suggestion("List the anchors as (non-membership, crossover, full membership)")

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "ThresholdTriplet":
        if not isinstance(values, (list, tuple)) or len(values) != 3:
            raise ConfigurationError(f"Expected three threshold anchors, got {values!r}")
        return cls(*values)

    def as_tuple(self):
        return (self.exclusion, self.crossover, self.inclusion)


@dataclass(frozen=True)
class SetCalibration:
    """How one fuzzy set is derived from a raw column."""

    name: str
    source: str
    thresholds: ThresholdTriplet
    method: str = "logistic"

    def __post_init__(self):
        if self.method not in CALIBRATION_METHODS:
            raise ConfigurationError(
                f"Unknown calibration method '{self.method}' for '{self.name}'",
                config_field=f"calibration.{self.name}.method",
            ).add_suggestion(f"Use one of: {', '.join(CALIBRATION_METHODS)}")


@dataclass
class TruthTableSettings:
    """Cutoffs for classifying truth table corners."""

    incl_cut: float
    pri_cut: Optional[float] = None
    max_conditions: int = 16
    sparse_corner_cases: int = 2

    def validate(self) -> None:
        _check_unit_interval(self.incl_cut, "truth_table.incl_cut")
        if self.pri_cut is not None:
            _check_unit_interval(self.pri_cut, "truth_table.pri_cut")
        if self.max_conditions <= 0:
            raise ConfigurationError(
                "max_conditions must be positive",
                config_field="truth_table.max_conditions",
            )
        if self.sparse_corner_cases < 0:
            raise ConfigurationError(
                "sparse_corner_cases cannot be negative",
                config_field="truth_table.sparse_corner_cases",
            )


@dataclass
class NecessitySettings:
    """Cutoffs for the necessary-disjunction scan."""

    incl_cut: float
    cov_cut: float
    ron_cut: float
    max_order: int = 2

    def validate(self) -> None:
        _check_unit_interval(self.incl_cut, "necessity.incl_cut")
        _check_unit_interval(self.cov_cut, "necessity.cov_cut")
        _check_unit_interval(self.ron_cut, "necessity.ron_cut")
        if self.max_order < 1:
            raise ConfigurationError(
                "max_order must be at least 1",
                config_field="necessity.max_order",
            )


@dataclass
class AnalysisConfig:
    """Everything a run needs besides the raw table."""

    case_id: str
    outcome: SetCalibration
    conditions: List[str]
    calibrations: Dict[str, SetCalibration]
    truth_table: TruthTableSettings
    necessity: NecessitySettings
    coverage_cut: float
    directional_expectations: Dict[str, Optional[int]] = field(default_factory=dict)
    neg_out: bool = False

    def validate(self) -> None:
        """Validate cutoffs and the condition list.

        Conditions lacking a calibration are not checked here; the
        condition set builder raises ``MissingCalibrationError`` for them.
        """
        if not self.case_id:
            raise ConfigurationError("case_id column must be named", config_field="case_id")
        if not self.conditions:
            raise ConfigurationError("At least one condition is required", config_field="conditions")
        if len(set(self.conditions)) != len(self.conditions):
            raise ConfigurationError("Condition names must be unique", config_field="conditions")
        if self.outcome.name in self.conditions:
            raise ConfigurationError(
                f"Outcome '{self.outcome.name}' is also listed as a condition",
                config_field="conditions",
            )
        self.truth_table.validate()
        self.necessity.validate()
        _check_unit_interval(self.coverage_cut, "coverage_cut")

        for cond, expectation in self.directional_expectations.items():
            if cond not in self.conditions:
                raise ConfigurationError(
                    f"Directional expectation given for unknown condition '{cond}'",
                    config_field="directional_expectations",
                )
            if expectation not in (None, 0, 1):
                raise ConfigurationError(
                    f"Directional expectation for '{cond}' must be 1, 0 or null",
                    config_field="directional_expectations",
                )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "case_id": self.case_id,
            "outcome": _calibration_to_dict(self.outcome),
            "conditions": list(self.conditions),
            "calibration": {k: _calibration_to_dict(v) for k, v in self.calibrations.items()},
            "truth_table": asdict(self.truth_table),
            "necessity": asdict(self.necessity),
            "coverage_cut": self.coverage_cut,
            "directional_expectations": dict(self.directional_expectations),
            "neg_out": self.neg_out,
        }


def _calibration_to_dict(cal: SetCalibration) -> Dict[str, Any]:
    return {
        "name": cal.name,
        "source": cal.source,
        "thresholds": list(cal.thresholds.as_tuple()),
        "method": cal.method,
    }


def _parse_calibration(name: str, data: Dict[str, Any], config_field: str) -> SetCalibration:
    if not isinstance(data, dict):
        raise ConfigurationError("Calibration entry must be an object", config_field=config_field)
    try:
        thresholds = ThresholdTriplet.from_sequence(data["thresholds"])
    except KeyError:
        raise ConfigurationError("Missing 'thresholds'", config_field=config_field) from None
    except ConfigurationError as exc:
        exc.config_field = f"{config_field}.thresholds"
        raise
    return SetCalibration(
        name=name,
        source=data.get("source", name),
        thresholds=thresholds,
        method=data.get("method", "logistic"),
    )


def _require(data: Dict[str, Any], key: str, config_field: str):
    if key not in data or data[key] is None:
        raise ConfigurationError(f"'{key}' must be supplied", config_field=config_field)
    return data[key]


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = _require(data, key, key)
    if not isinstance(value, dict):
        raise ConfigurationError("must be an object", config_field=key)
    return value


def _optional_int(data: Dict[str, Any], key: str, default: int, config_field: str) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"must be an integer, got {value!r}", config_field=config_field)
    return value


def _optional_bool(data: Dict[str, Any], key: str, default: bool, config_field: str) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"must be true or false, got {value!r}", config_field=config_field)
    return value


def _condition_list(data: Dict[str, Any]) -> List[str]:
    conditions = _require(data, "conditions", "conditions")
    if not isinstance(conditions, list) or not all(isinstance(c, str) for c in conditions):
        raise ConfigurationError("must be a list of set names", config_field="conditions")
    return list(conditions)


def _expectations(data: Dict[str, Any]) -> Dict[str, Optional[int]]:
    expectations = data.get("directional_expectations") or {}
    if not isinstance(expectations, dict):
        raise ConfigurationError("must be an object", config_field="directional_expectations")
    return dict(expectations)


def config_from_dict(data: Dict[str, Any]) -> AnalysisConfig:
    """Build and validate an ``AnalysisConfig`` from its JSON form."""
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be an object")

    outcome_data = _section(data, "outcome")
    outcome_name = _require(outcome_data, "name", "outcome.name")
    outcome = _parse_calibration(outcome_name, outcome_data, "outcome")

    calibration_data = data.get("calibration") or {}
    if not isinstance(calibration_data, dict):
        raise ConfigurationError("must be an object", config_field="calibration")
    calibrations = {
        name: _parse_calibration(name, entry, f"calibration.{name}")
        for name, entry in calibration_data.items()
    }

    tt_data = _section(data, "truth_table")
    truth_table = TruthTableSettings(
        incl_cut=_require(tt_data, "incl_cut", "truth_table.incl_cut"),
        pri_cut=tt_data.get("pri_cut"),
        max_conditions=_optional_int(tt_data, "max_conditions", 16, "truth_table.max_conditions"),
        sparse_corner_cases=_optional_int(tt_data, "sparse_corner_cases", 2, "truth_table.sparse_corner_cases"),
    )

    nec_data = _section(data, "necessity")
    necessity = NecessitySettings(
        incl_cut=_require(nec_data, "incl_cut", "necessity.incl_cut"),
        cov_cut=_require(nec_data, "cov_cut", "necessity.cov_cut"),
        ron_cut=_require(nec_data, "ron_cut", "necessity.ron_cut"),
        max_order=_optional_int(nec_data, "max_order", 2, "necessity.max_order"),
    )

    config = AnalysisConfig(
        case_id=_require(data, "case_id", "case_id"),
        outcome=outcome,
        conditions=_condition_list(data),
        calibrations=calibrations,
        truth_table=truth_table,
        necessity=necessity,
        coverage_cut=_require(data, "coverage_cut", "coverage_cut"),
        directional_expectations=_expectations(data),
        neg_out=_optional_bool(data, "neg_out", False, "neg_out"),
    )
    config.validate()
    return config


def load_config(path) -> AnalysisConfig:
    """Read a JSON configuration file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file is not valid JSON: {path} ({e})") from e

    config = config_from_dict(data)
    logger.info("Loaded configuration from %s (%d conditions)", path, len(config.conditions))
    return config


__all__ = [
    "ThresholdTriplet",
    "SetCalibration",
    "TruthTableSettings",
    "NecessitySettings",
    "AnalysisConfig",
    "config_from_dict",
    "load_config",
]
