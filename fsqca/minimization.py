# fsqca/minimization.py
"""
Minimization Module for QCA
---------------------------
Reduces a truth table into the three standard solutions:

• Complex (C): positive rows only, every remainder treated as negative
• Parsimonious (P): remainders used as "don't care" rows
• Intermediate (I): only the remainders in line with directional
  expectations (easy counterfactuals) are used

Finding a minimal Boolean cover is delegated to a ``BooleanMinimizer``;
the default one wraps sympy's Quine-McCluskey implementation (SOPform).
Parameters of fit for the resulting terms are computed here from the fuzzy
memberships held by the truth table.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
from sympy import And, Not, Or, Symbol
from sympy.logic import SOPform
from sympy.logic.boolalg import BooleanFalse, BooleanTrue

from .boolean_algebra import Term, covers, expression_membership, subsumes, term_membership, term_to_string
from .metrics import consistency_pri, consistency_raw, coverage_raw
from .truth_table import TruthTable

logger = logging.getLogger(__name__)

SOLUTION_KINDS = ("complex", "parsimonious", "intermediate")


# =============================================================================
# Minimizer interface
# =============================================================================

class BooleanMinimizer(ABC):
    """Finds a minimal sum-of-products cover of the ``on_set`` rows."""

    @abstractmethod
    def minimize(
        self,
        conditions: Sequence[str],
        on_set: Sequence[Sequence[int]],
        dont_cares: Sequence[Sequence[int]] = (),
    ) -> List[Term]:
        """
        on_set / dont_cares: crisp configurations aligned with ``conditions``.
        Returns terms as {condition: 1|0}; an empty list means no cover.
        """


class SympyMinimizer(BooleanMinimizer):
    """Quine-McCluskey minimization through ``sympy.logic.SOPform``."""

    def minimize(self, conditions, on_set, dont_cares=()):
        if not on_set:
            return []
        symbols = [Symbol(c) for c in conditions]
        expr = SOPform(
            symbols,
            [list(row) for row in on_set],
            [list(row) for row in dont_cares],
        )
        return self._to_terms(expr, list(conditions))

    @staticmethod
    def _literal(arg) -> Term:
        if isinstance(arg, Not):
            return {str(arg.args[0]): 0}
        return {str(arg): 1}

    def _to_terms(self, expr, conditions: List[str]) -> List[Term]:
        if isinstance(expr, BooleanTrue):
            return [{}]
        if isinstance(expr, BooleanFalse):
            return []

        products = expr.args if isinstance(expr, Or) else (expr,)
        terms = []
        for product in products:
            literals: Term = {}
            for arg in (product.args if isinstance(product, And) else (product,)):
                literals.update(self._literal(arg))
            terms.append({c: literals[c] for c in conditions if c in literals})

        order = {c: i for i, c in enumerate(conditions)}
        terms.sort(key=lambda t: (len(t), [(order[c], -v) for c, v in t.items()]))
        return terms


# =============================================================================
# Solution objects
# =============================================================================

@dataclass
class SolutionTerm:
    literals: Term
    expression: str
    consistency: float
    pri: float
    raw_coverage: float
    unique_coverage: float
    cases: List[object] = field(default_factory=list)
    below_coverage_cut: bool = False

    def to_dict(self) -> Dict:
        return {
            "term": self.expression,
            "literals": dict(self.literals),
            "inclS": self.consistency,
            "PRI": self.pri,
            "covS": self.raw_coverage,
            "covU": self.unique_coverage,
            "cases": [str(c) for c in self.cases],
            "below_coverage_cut": self.below_coverage_cut,
        }


@dataclass
class Solution:
    kind: str
    outcome: str
    terms: List[SolutionTerm]
    consistency: float
    pri: float
    coverage: float

    @property
    def expression(self) -> str:
        if not self.terms:
            return ""
        return " + ".join(t.expression for t in self.terms)

    def to_dict(self) -> Dict:
        return {
            "type": self.kind,
            "outcome": self.outcome,
            "expression": self.expression,
            "terms": [t.to_dict() for t in self.terms],
            "metrics": {
                "Consistency": self.consistency,
                "PRI": self.pri,
                "Coverage": self.coverage,
            },
        }


# =============================================================================
# Intermediate solution
# =============================================================================

def intermediate_terms(
    complex_terms: List[Term],
    parsimonious_terms: List[Term],
    directional_expectations: Optional[Dict[str, Optional[int]]],
    conditions: Sequence[str],
) -> List[Term]:
    """
    For every complex term and every parsimonious term contained in it, keep
    the parsimonious literals plus the complex literals that match the
    expected direction or carry no expectation. Literals that run against
    an expectation are removed (easy counterfactuals).
    """
    expectations = directional_expectations or {}
    candidates: List[Term] = []

    for c_term in complex_terms:
        parents = [p for p in parsimonious_terms if subsumes(p, c_term)]
        if not parents:
            candidates.append(dict(c_term))
            continue
        for p_term in parents:
            kept = dict(p_term)
            for cond, value in c_term.items():
                expected = expectations.get(cond)
                if expected is None or expected == value:
                    kept[cond] = value
            candidates.append({c: kept[c] for c in conditions if c in kept})

    unique: List[Term] = []
    for t in candidates:
        if t not in unique:
            unique.append(t)

    # absorption: drop terms that contain another candidate
    return [
        t for t in unique
        if not any(other != t and subsumes(other, t) for other in unique)
    ]


# =============================================================================
# Parameters of fit
# =============================================================================

def evaluate_solution(kind: str, terms: List[Term], truth_table: TruthTable, coverage_cut: float) -> Solution:
    df = truth_table.memberships
    Y = truth_table.outcome_membership.to_numpy()
    conditions = truth_table.conditions
    positive_rows = [
        (truth_table.configuration_dict(r), r.cases) for r in truth_table.positive()
    ]

    memberships = [term_membership(t, df) for t in terms]
    solution_mem = expression_membership(terms, df) if terms else np.zeros(len(df))

    solution_terms = []
    for i, (term, mem) in enumerate(zip(terms, memberships)):
        others = [m for j, m in enumerate(memberships) if j != i]
        others_mem = np.max(others, axis=0) if others else np.zeros(len(df))
        raw_cov = coverage_raw(mem, Y)
        unique_cov = coverage_raw(solution_mem, Y) - coverage_raw(others_mem, Y)

        cases = []
        for config, row_cases in positive_rows:
            if covers(term, config):
                cases.extend(row_cases)

        solution_terms.append(SolutionTerm(
            literals=term,
            expression=term_to_string(term, conditions),
            consistency=consistency_raw(mem, Y),
            pri=consistency_pri(mem, Y),
            raw_coverage=raw_cov,
            unique_coverage=float(unique_cov),
            cases=cases,
            below_coverage_cut=bool(raw_cov < coverage_cut),
        ))

    if terms:
        consistency = consistency_raw(solution_mem, Y)
        pri = consistency_pri(solution_mem, Y)
        coverage = coverage_raw(solution_mem, Y)
    else:
        consistency = pri = coverage = float("nan")

    return Solution(
        kind=kind,
        outcome=truth_table.outcome_label,
        terms=solution_terms,
        consistency=consistency,
        pri=pri,
        coverage=coverage,
    )


# =============================================================================
# Entry point
# =============================================================================

def minimize_truth_table(
    truth_table: TruthTable,
    coverage_cut: float,
    directional_expectations: Optional[Dict[str, Optional[int]]] = None,
    minimizer: Optional[BooleanMinimizer] = None,
) -> Dict[str, Solution]:
    """
    Complex, parsimonious and intermediate solutions of a truth table.
    """
    minimizer = minimizer or SympyMinimizer()
    conditions = truth_table.conditions

    on_set = [r.configuration for r in truth_table.positive()]
    remainders = [r.configuration for r in truth_table.remainders()]

    if not on_set:
        logger.warning("No positive truth table rows for %s; solutions are empty", truth_table.outcome_label)

    complex_terms = minimizer.minimize(conditions, on_set)
    parsimonious_terms = minimizer.minimize(conditions, on_set, remainders)
    intermediate = intermediate_terms(
        complex_terms, parsimonious_terms, directional_expectations, conditions
    )

    solutions = {
        "complex": evaluate_solution("complex", complex_terms, truth_table, coverage_cut),
        "parsimonious": evaluate_solution("parsimonious", parsimonious_terms, truth_table, coverage_cut),
        "intermediate": evaluate_solution("intermediate", intermediate, truth_table, coverage_cut),
    }

    for kind in SOLUTION_KINDS:
        logger.info("%s solution: %s", kind.capitalize(), solutions[kind].expression or "(none)")
    return solutions
