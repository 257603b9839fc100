# fsqca/boolean_algebra.py
"""
Boolean Algebra for QCA
-----------------------
Fuzzy evaluation and string forms of the Boolean terms produced by
minimization.

A term is a dict {condition: 1 | 0}: 1 means the condition must be
present, 0 means absent, and a condition left out of the dict is dropped
("don't care"). Written out, terms use "*" for AND, "+" for OR and "~"
for NOT, e.g. "fs_eid*~fs_prefilled + fs_availability".
"""

from typing import Dict, Iterable, Sequence

import numpy as np
import pandas as pd

from .fuzzy_logic import clip01

Term = Dict[str, int]


# =============================================================================
# BASIC OPERATORS
# =============================================================================

def fuzzy_and(a, b):
    """Fuzzy AND (minimum rule)."""
    return np.minimum(a, b)


def fuzzy_or(a, b):
    """Fuzzy OR (maximum rule)."""
    return np.maximum(a, b)


def fuzzy_not(a):
    """Fuzzy negation (~)."""
    return 1.0 - a


# =============================================================================
# STRING FORMS
# =============================================================================

def term_to_string(term: Term, condition_order: Sequence[str] = None) -> str:
    """
    {"A": 1, "B": 0} → "A*~B"

    An empty term is the tautology and renders as "1".
    """
    if not term:
        return "1"
    names = [c for c in condition_order if c in term] if condition_order else list(term)
    return "*".join(name if term[name] == 1 else f"~{name}" for name in names)


def expression_to_string(terms: Iterable[Term], condition_order: Sequence[str] = None) -> str:
    return " + ".join(term_to_string(t, condition_order) for t in terms)


# =============================================================================
# FUZZY EVALUATION
# =============================================================================

def term_membership(term: Term, df: pd.DataFrame) -> np.ndarray:
    """
    Membership of every case (row of ``df``) in a conjunction.
    """
    result = np.ones(len(df), dtype=float)
    for var, value in term.items():
        if var not in df.columns:
            raise KeyError(f"Variable '{var}' not found in dataset.")
        values = df[var].astype(float).to_numpy()
        result = fuzzy_and(result, values if value == 1 else fuzzy_not(values))
    return clip01(result)


def expression_membership(terms: Iterable[Term], df: pd.DataFrame) -> np.ndarray:
    """
    Membership of every case in a disjunction of terms (OR over terms).
    """
    final = np.zeros(len(df), dtype=float)
    for t in terms:
        final = fuzzy_or(final, term_membership(t, df))
    return clip01(final)


def literal_disjunction_membership(literals: Term, df: pd.DataFrame) -> np.ndarray:
    """
    Membership in A + ~B + ... for a dict of single literals.
    """
    return expression_membership([{k: v} for k, v in literals.items()], df)


def covers(term: Term, configuration: Dict[str, int]) -> bool:
    """True when a crisp configuration satisfies every literal of the term."""
    return all(configuration.get(cond) == value for cond, value in term.items())


def subsumes(general: Term, specific: Term) -> bool:
    """True when every literal of ``general`` also appears in ``specific``."""
    return all(specific.get(cond) == value for cond, value in general.items())
