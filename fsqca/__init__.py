"""
fsQCA of public service delivery.

Calibration, necessity analysis, truth table construction and minimization
for fuzzy-set Qualitative Comparative Analysis.
"""

from .calibration import CalibrationResult, build_condition_sets
from .config import (
    AnalysisConfig,
    NecessitySettings,
    SetCalibration,
    ThresholdTriplet,
    TruthTableSettings,
    config_from_dict,
    load_config,
)
from .exceptions import (
    AmbiguousMembershipError,
    ConditionExplosionError,
    ConfigurationError,
    DataShapeError,
    FsqcaError,
    MissingCalibrationError,
)
from .fuzzy_logic import calibrate, find_ambiguous
from .minimization import BooleanMinimizer, Solution, SympyMinimizer, minimize_truth_table
from .necessity import necessary_disjunctions, necessity_fit
from .pipeline import AnalysisResult, run_analysis
from .truth_table import RowStatus, TruthTable, TruthTableRow, build_truth_table

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "AmbiguousMembershipError",
    "BooleanMinimizer",
    "CalibrationResult",
    "ConditionExplosionError",
    "ConfigurationError",
    "DataShapeError",
    "FsqcaError",
    "MissingCalibrationError",
    "NecessitySettings",
    "RowStatus",
    "SetCalibration",
    "Solution",
    "SympyMinimizer",
    "ThresholdTriplet",
    "TruthTable",
    "TruthTableRow",
    "TruthTableSettings",
    "build_condition_sets",
    "build_truth_table",
    "calibrate",
    "config_from_dict",
    "find_ambiguous",
    "load_config",
    "minimize_truth_table",
    "necessary_disjunctions",
    "necessity_fit",
    "run_analysis",
]
