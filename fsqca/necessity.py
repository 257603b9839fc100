# fsqca/necessity.py
"""
Necessity analysis.

• ``necessity_fit``: parameters of fit of every single condition and its
  negation as a necessary condition for the outcome (or ~outcome)
• ``necessary_disjunctions``: scan of OR-combinations of conditions
  (SUIN conditions) that pass the necessity cutoffs
"""

import itertools
import logging
from typing import List, Sequence

import pandas as pd

from .boolean_algebra import Term, expression_to_string, literal_disjunction_membership, subsumes
from .config import NecessitySettings
from .exceptions import DataShapeError
from .fuzzy_logic import negate
from .metrics import consistency_necessity, coverage_necessity, relevance_necessity

logger = logging.getLogger(__name__)

FIT_COLUMNS = ["condition", "inclN", "RoN", "covN"]


def _outcome_vector(calibrated: pd.DataFrame, outcome: str, neg_out: bool):
    if outcome not in calibrated.columns:
        raise DataShapeError(f"Outcome '{outcome}' not found in calibrated table")
    Y = calibrated[outcome].astype(float).to_numpy()
    return negate(Y) if neg_out else Y


def _check_conditions(calibrated: pd.DataFrame, conditions: Sequence[str]) -> None:
    missing = [c for c in conditions if c not in calibrated.columns]
    if missing:
        raise DataShapeError(f"Calibrated table lacks conditions: {missing}")


def necessity_fit(
    calibrated: pd.DataFrame,
    conditions: Sequence[str],
    outcome: str,
    neg_out: bool = False,
) -> pd.DataFrame:
    """
    inclN, RoN and covN for each condition X and its negation ~X.
    """
    _check_conditions(calibrated, conditions)
    Y = _outcome_vector(calibrated, outcome, neg_out)

    records = []
    for cond in conditions:
        X = calibrated[cond].astype(float).to_numpy()
        for label, values in ((cond, X), (f"~{cond}", negate(X))):
            records.append({
                "condition": label,
                "inclN": consistency_necessity(values, Y),
                "RoN": relevance_necessity(values, Y),
                "covN": coverage_necessity(values, Y),
            })

    fit = pd.DataFrame(records, columns=FIT_COLUMNS)
    best = fit.loc[fit["inclN"].idxmax()] if not fit["inclN"].isna().all() else None
    if best is not None:
        logger.info(
            "Necessity for %s%s: highest inclN %.3f (%s)",
            "~" if neg_out else "",
            outcome,
            best["inclN"],
            best["condition"],
        )
    return fit


def necessary_disjunctions(
    calibrated: pd.DataFrame,
    conditions: Sequence[str],
    outcome: str,
    settings: NecessitySettings,
    neg_out: bool = False,
) -> pd.DataFrame:
    """
    Disjunctions of up to ``settings.max_order`` literals that pass the
    inclN, covN and RoN cutoffs. A disjunction containing an already
    accepted smaller one is redundant and left out.
    """
    settings.validate()
    _check_conditions(calibrated, conditions)
    Y = _outcome_vector(calibrated, outcome, neg_out)

    accepted: List[Term] = []
    records = []
    max_order = min(settings.max_order, len(conditions))

    for order in range(1, max_order + 1):
        for combo in itertools.combinations(conditions, order):
            for signs in itertools.product((1, 0), repeat=order):
                literals: Term = dict(zip(combo, signs))
                if any(subsumes(smaller, literals) for smaller in accepted):
                    continue

                membership = literal_disjunction_membership(literals, calibrated)
                incl = consistency_necessity(membership, Y)
                cov = coverage_necessity(membership, Y)
                ron = relevance_necessity(membership, Y)

                if incl >= settings.incl_cut and cov >= settings.cov_cut and ron >= settings.ron_cut:
                    accepted.append(literals)
                    records.append({
                        "condition": expression_to_string([{c: v} for c, v in literals.items()]),
                        "inclN": incl,
                        "RoN": ron,
                        "covN": cov,
                    })

    result = pd.DataFrame(records, columns=FIT_COLUMNS)
    if not result.empty:
        result = result.sort_values("inclN", ascending=False, kind="mergesort").reset_index(drop=True)

    logger.info(
        "Necessary disjunctions for %s%s: %d found (incl.cut=%.2f, cov.cut=%.2f, ron.cut=%.2f)",
        "~" if neg_out else "",
        outcome,
        len(result),
        settings.incl_cut,
        settings.cov_cut,
        settings.ron_cut,
    )
    return result
