# fsqca/metrics.py
"""Set-theoretic parameters of fit for fuzzy memberships."""

import numpy as np


def _pair(x, y):
    return np.asarray(x, dtype=float), np.asarray(y, dtype=float)


def _ratio(numer, denom):
    if denom <= 0:
        return float("nan")
    return float(numer / denom)


# -------------------------------------------------------------------
# Sufficiency
# -------------------------------------------------------------------

def consistency_raw(cond_membership, outcome_membership):
    """Raw consistency for sufficiency: sum(min(Xi, Yi)) / sum(Xi)."""
    X, Y = _pair(cond_membership, outcome_membership)
    return _ratio(np.minimum(X, Y).sum(), X.sum())


def consistency_pri(cond_membership, outcome_membership):
    """
    Proportional reduction in inconsistency: the share of X's consistency
    that is not also consistency with ~Y.
    """
    X, Y = _pair(cond_membership, outcome_membership)
    xy = np.minimum(X, Y).sum()
    both = np.minimum(np.minimum(X, Y), 1.0 - Y).sum()
    return _ratio(xy - both, X.sum() - both)


def coverage_raw(cond_membership, outcome_membership):
    """Raw coverage: sum(min(Xi, Yi)) / sum(Yi)."""
    X, Y = _pair(cond_membership, outcome_membership)
    return _ratio(np.minimum(X, Y).sum(), Y.sum())


# -------------------------------------------------------------------
# Necessity
# -------------------------------------------------------------------

def consistency_necessity(cond_membership, outcome_membership):
    """inclN: sum(min(Xi, Yi)) / sum(Yi)."""
    return coverage_raw(cond_membership, outcome_membership)


def coverage_necessity(cond_membership, outcome_membership):
    """covN: sum(min(Xi, Yi)) / sum(Xi)."""
    return consistency_raw(cond_membership, outcome_membership)


def relevance_necessity(cond_membership, outcome_membership):
    """RoN: sum(1 - Xi) / sum(1 - min(Xi, Yi))."""
    X, Y = _pair(cond_membership, outcome_membership)
    return _ratio((1.0 - X).sum(), (1.0 - np.minimum(X, Y)).sum())
