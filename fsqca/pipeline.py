# fsqca/pipeline.py
"""
The full fsQCA run: calibration → necessity → truth table → minimization.

Any error aborts the run; there is no partial-result mode.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from .calibration import CalibrationResult, build_condition_sets
from .config import AnalysisConfig
from .minimization import BooleanMinimizer, Solution, minimize_truth_table
from .necessity import necessary_disjunctions, necessity_fit
from .truth_table import TruthTable, build_truth_table

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    config: AnalysisConfig
    calibration: CalibrationResult
    necessity: pd.DataFrame
    necessity_negated: pd.DataFrame
    disjunctions: pd.DataFrame
    truth_table: TruthTable
    solutions: Dict[str, Solution]
    warnings: List[str] = field(default_factory=list)

    @property
    def calibrated(self) -> pd.DataFrame:
        return self.calibration.calibrated


def run_analysis(
    raw: pd.DataFrame,
    config: AnalysisConfig,
    minimizer: Optional[BooleanMinimizer] = None,
) -> AnalysisResult:
    """Run every stage with one explicit configuration."""
    config.validate()
    outcome = config.outcome.name

    logger.info("Calibrating %d conditions and outcome '%s'", len(config.conditions), outcome)
    calibration = build_condition_sets(raw, config)
    calibrated = calibration.calibrated

    logger.info("Running necessity analysis")
    necessity = necessity_fit(calibrated, config.conditions, outcome, neg_out=False)
    necessity_negated = necessity_fit(calibrated, config.conditions, outcome, neg_out=True)
    disjunctions = necessary_disjunctions(
        calibrated, config.conditions, outcome, config.necessity, neg_out=config.neg_out
    )

    logger.info("Building truth table")
    truth_table = build_truth_table(
        calibrated, config.conditions, outcome, config.truth_table, neg_out=config.neg_out
    )

    logger.info("Minimizing truth table")
    solutions = minimize_truth_table(
        truth_table,
        coverage_cut=config.coverage_cut,
        directional_expectations=config.directional_expectations,
        minimizer=minimizer,
    )

    warnings = list(calibration.warnings) + list(truth_table.warnings)
    if not truth_table.positive():
        warnings.append(f"No truth table row reaches incl.cut={config.truth_table.incl_cut}")
    for kind, solution in solutions.items():
        for term in solution.terms:
            if term.below_coverage_cut:
                warnings.append(
                    f"{kind} term {term.expression} covers {term.raw_coverage:.3f}, "
                    f"below coverage_cut={config.coverage_cut}"
                )

    return AnalysisResult(
        config=config,
        calibration=calibration,
        necessity=necessity,
        necessity_negated=necessity_negated,
        disjunctions=disjunctions,
        truth_table=truth_table,
        solutions=solutions,
        warnings=warnings,
    )
