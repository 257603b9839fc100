# fsqca/fuzzy_logic.py
"""
Fuzzy Logic Utilities for QCA
-----------------------------
Direct calibration of raw indicator scores into fuzzy-set membership,
following the three-anchor method (Ragin 2008):

• exclusion → full non-membership (0.0)
• crossover → point of maximum ambiguity (0.5)
• inclusion → full membership (1.0)

Two interpolations are available between the anchors:

• "logistic" (default): the log-odds S-curve of the direct method,
  rescaled so the anchors are hit exactly
• "linear": piecewise-linear interpolation
"""

import numpy as np
import pandas as pd

from .config import ThresholdTriplet
from .exceptions import ConfigurationError

# log-odds reached at the outer anchors before rescaling (Ragin: ±3 ≈ 0.95)
LOG_ODDS_SPAN = 3.0

AMBIGUOUS = 0.5


# ======================================================
# BASIC UTILITIES
# ======================================================

def clip01(values):
    """
    Ensures all fuzzy membership values stay within [0,1].
    """
    return np.clip(values, 0.0, 1.0)


def negate(values):
    """
    Fuzzy negation (~X).
    """
    return 1.0 - np.asarray(values, dtype=float)


def _as_float_array(values) -> np.ndarray:
    if isinstance(values, pd.Series):
        return values.astype(float).to_numpy()
    return np.atleast_1d(np.asarray(values, dtype=float))


# ======================================================
# LOGISTIC CALIBRATION (direct method)
# ======================================================

def calibrate_logistic(values, thresholds: ThresholdTriplet) -> np.ndarray:
    """
    S-shaped calibration.

    The deviation from the crossover is scaled to ±LOG_ODDS_SPAN log-odds
    at the outer anchors (separately above and below the crossover), passed
    through the logistic function, and the resulting segment is stretched
    so that the anchors map to exactly 0 and 1. Values beyond the anchors
    saturate.
    """
    x = _as_float_array(values)
    low, cross, high = thresholds.as_tuple()

    deviation = x - cross
    scale = np.where(deviation >= 0, LOG_ODDS_SPAN / (high - cross), LOG_ODDS_SPAN / (cross - low))
    raw = 1.0 / (1.0 + np.exp(-deviation * scale))

    edge = 1.0 / (1.0 + np.exp(-LOG_ODDS_SPAN))
    result = AMBIGUOUS + (raw - AMBIGUOUS) * (AMBIGUOUS / (edge - AMBIGUOUS))

    result[x <= low] = 0.0
    result[x >= high] = 1.0
    result[x == cross] = AMBIGUOUS

    return clip01(result)


# ======================================================
# THREE-THRESHOLD LINEAR CALIBRATION
# ======================================================

def calibrate_linear(values, thresholds: ThresholdTriplet) -> np.ndarray:
    """Piecewise-linear calibration between the three anchors."""
    x = _as_float_array(values)
    low, cross, high = thresholds.as_tuple()
    result = np.zeros_like(x, dtype=float)

    result[x >= high] = 1.0

    mask_low = (x > low) & (x < cross)
    result[mask_low] = 0.5 * (x[mask_low] - low) / (cross - low)

    mask_high = (x >= cross) & (x < high)
    result[mask_high] = 0.5 + 0.5 * (x[mask_high] - cross) / (high - cross)

    result[np.isnan(x)] = np.nan
    return clip01(result)


# ======================================================
# UNIVERSAL CALIBRATION WRAPPER
# ======================================================

def calibrate(values, thresholds: ThresholdTriplet, method: str = "logistic") -> np.ndarray:
    """
    Calibrates raw values into fuzzy membership scores.

    Parameters
    ----------
    values : array-like or pd.Series
    thresholds : ThresholdTriplet
    method : str
        "logistic" → S-curve (default)
        "linear"   → piecewise linear

    Returns
    -------
    np.ndarray (values between 0 and 1)
    """
    if not isinstance(thresholds, ThresholdTriplet):
        thresholds = ThresholdTriplet.from_sequence(thresholds)

    if method == "logistic":
        return calibrate_logistic(values, thresholds)
    if method == "linear":
        return calibrate_linear(values, thresholds)
    raise ConfigurationError(f"Unknown calibration method '{method}'")


# ======================================================
# AMBIGUITY CHECK
# ======================================================

def find_ambiguous(memberships) -> np.ndarray:
    """
    Positions whose membership is exactly 0.5 (neither in nor out of the set).
    """
    return np.flatnonzero(_as_float_array(memberships) == AMBIGUOUS)
