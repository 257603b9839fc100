# fsqca/calibration.py
"""
Condition set builder.

Turns the raw case table into the calibrated table: one fuzzy set per
configured condition plus the calibrated outcome, indexed by case label.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np
import pandas as pd

from .config import AnalysisConfig, SetCalibration
from .exceptions import DataShapeError, MissingCalibrationError
from .fuzzy_logic import calibrate, find_ambiguous

logger = logging.getLogger(__name__)


@dataclass
class AmbiguousCase:
    """A case whose calibrated membership landed exactly on 0.5."""

    case: object
    raw_value: float
    at_crossover: bool


@dataclass
class CalibrationResult:
    calibrated: pd.DataFrame
    calibrations: Dict[str, SetCalibration]
    ambiguous: Dict[str, List[AmbiguousCase]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def thresholds_frame(self) -> pd.DataFrame:
        """Anchors used for every set, one row per set."""
        rows = []
        for name, cal in self.calibrations.items():
            low, cross, high = cal.thresholds.as_tuple()
            rows.append({
                "set": name,
                "source": cal.source,
                "method": cal.method,
                "exclusion": low,
                "crossover": cross,
                "inclusion": high,
                "ambiguous_cases": len(self.ambiguous.get(name, [])),
            })
        return pd.DataFrame(rows)


def resolve_calibrations(config: AnalysisConfig) -> Dict[str, SetCalibration]:
    """
    Calibrations for every condition plus the outcome, in table order.

    Raises MissingCalibrationError listing every condition without one.
    """
    missing = [c for c in config.conditions if c not in config.calibrations]
    if missing:
        raise MissingCalibrationError(
            f"No threshold triplet configured for: {', '.join(missing)}",
            config_field="calibration",
            context={"missing": missing},
        ).add_suggestion("Add an entry with 'source' and 'thresholds' for each condition")

    resolved = {c: config.calibrations[c] for c in config.conditions}
    resolved[config.outcome.name] = config.outcome
    return resolved


def _check_raw_table(raw: pd.DataFrame, config: AnalysisConfig, calibrations: Dict[str, SetCalibration]) -> None:
    if raw is None or raw.empty:
        raise DataShapeError("Input table is empty")

    if config.case_id not in raw.columns:
        raise DataShapeError(
            f"Case identifier column '{config.case_id}' not found",
            context={"columns": list(raw.columns)},
        )

    labels = raw[config.case_id]
    if labels.isna().any():
        rows = [int(i) for i in np.flatnonzero(labels.isna().to_numpy())]
        raise DataShapeError(
            f"Missing case identifiers in rows {rows}",
            context={"rows": rows},
        )
    duplicated = labels[labels.duplicated()].tolist()
    if duplicated:
        raise DataShapeError(
            f"Duplicated case identifiers: {duplicated}",
            context={"duplicated": duplicated},
        )

    for name, cal in calibrations.items():
        if cal.source not in raw.columns:
            raise DataShapeError(
                f"Source column '{cal.source}' for set '{name}' not found",
                context={"columns": list(raw.columns)},
            )
        column = raw[cal.source]
        if not pd.api.types.is_numeric_dtype(column) or pd.api.types.is_bool_dtype(column):
            raise DataShapeError(
                f"Source column '{cal.source}' for set '{name}' is not numeric"
            ).add_context("dtype", str(column.dtype))
        if column.isna().any():
            cases = raw.loc[column.isna(), config.case_id].tolist()
            raise DataShapeError(
                f"Source column '{cal.source}' has missing values for cases {cases}",
                context={"cases": cases},
            )


def build_condition_sets(raw: pd.DataFrame, config: AnalysisConfig) -> CalibrationResult:
    """
    Calibrate every condition and the outcome.

    Every calibrated column is scanned for memberships of exactly 0.5;
    those cases are recorded in ``CalibrationResult.ambiguous`` and
    reported as warnings.
    """
    calibrations = resolve_calibrations(config)
    _check_raw_table(raw, config, calibrations)

    index = pd.Index(raw[config.case_id].tolist(), name=config.case_id)
    columns = {}
    ambiguous: Dict[str, List[AmbiguousCase]] = {}
    warnings: List[str] = []

    for name, cal in calibrations.items():
        raw_values = raw[cal.source].astype(float).to_numpy()
        membership = calibrate(raw_values, cal.thresholds, method=cal.method)
        if len(membership) != len(raw):
            raise DataShapeError(
                f"Calibrated set '{name}' has {len(membership)} scores, raw table has {len(raw)} rows"
            )
        columns[name] = membership

        positions = find_ambiguous(membership)
        if len(positions):
            hits = [
                AmbiguousCase(
                    case=index[i],
                    raw_value=float(raw_values[i]),
                    at_crossover=bool(raw_values[i] == cal.thresholds.crossover),
                )
                for i in positions
            ]
            ambiguous[name] = hits
            message = (
                f"Cases with membership = 0.5 in {name}: "
                + ", ".join(str(h.case) for h in hits)
            )
            warnings.append(message)
            logger.warning(message)
        else:
            logger.debug("No 0.5 scores in %s", name)

    calibrated = pd.DataFrame(columns, index=index)

    logger.info(
        "Calibrated %d sets for %d cases", len(calibrations), len(calibrated)
    )
    return CalibrationResult(
        calibrated=calibrated,
        calibrations=calibrations,
        ambiguous=ambiguous,
        warnings=warnings,
    )
