# fsqca/truth_table.py
"""
Truth Table builder for fsQCA.

Every case is assigned to exactly one of the 2^k corners of the property
space by binarizing its condition memberships at 0.5. For each corner with
cases the sufficiency parameters are computed from the fuzzy memberships of
all cases in that corner's configuration; corners without cases are logical
remainders and are left for the minimizer's remainder policy.
"""

import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import TruthTableSettings
from .exceptions import AmbiguousMembershipError, ConditionExplosionError, DataShapeError
from .fuzzy_logic import AMBIGUOUS
from .metrics import consistency_pri, consistency_raw, coverage_raw

logger = logging.getLogger(__name__)


class RowStatus(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    REMAINDER = "remainder"


OUT_LABELS = {
    RowStatus.POSITIVE: "1",
    RowStatus.NEGATIVE: "0",
    RowStatus.REMAINDER: "?",
}


@dataclass
class TruthTableRow:
    index: int
    configuration: Tuple[int, ...]
    cases: List[object]
    consistency: float
    pri: float
    coverage: float
    status: RowStatus
    contradictory: bool = False

    @property
    def n_cases(self) -> int:
        return len(self.cases)

    @property
    def config_string(self) -> str:
        return "".join(str(b) for b in self.configuration)


@dataclass
class TruthTable:
    conditions: List[str]
    outcome: str
    rows: List[TruthTableRow]
    settings: TruthTableSettings
    memberships: pd.DataFrame
    outcome_membership: pd.Series
    neg_out: bool = False
    warnings: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def n_cases(self) -> int:
        return sum(r.n_cases for r in self.rows)

    @property
    def outcome_label(self) -> str:
        return f"~{self.outcome}" if self.neg_out else self.outcome

    def positive(self) -> List[TruthTableRow]:
        return [r for r in self.rows if r.status is RowStatus.POSITIVE]

    def negative(self) -> List[TruthTableRow]:
        return [r for r in self.rows if r.status is RowStatus.NEGATIVE]

    def remainders(self) -> List[TruthTableRow]:
        return [r for r in self.rows if r.status is RowStatus.REMAINDER]

    def configuration_dict(self, row: TruthTableRow) -> Dict[str, int]:
        return dict(zip(self.conditions, row.configuration))

    def to_frame(self, sort_by: Optional[str] = None, include_remainders: bool = True) -> pd.DataFrame:
        """
        Report form: one line per corner.

        sort_by: None (corner order), "incl" (consistency, then n) or "n".
        """
        records = []
        for r in self.rows:
            if not include_remainders and r.status is RowStatus.REMAINDER:
                continue
            record = {"row": r.index}
            record.update(self.configuration_dict(r))
            record.update({
                "OUT": OUT_LABELS[r.status],
                "n": r.n_cases,
                "incl": r.consistency,
                "PRI": r.pri,
                "cov": r.coverage,
                "status": r.status.value,
                "contradictory": r.contradictory,
                "cases": ", ".join(str(c) for c in r.cases),
            })
            records.append(record)

        columns = ["row"] + self.conditions + ["OUT", "n", "incl", "PRI", "cov", "status", "contradictory", "cases"]
        df = pd.DataFrame(records, columns=columns)

        if sort_by == "incl":
            df = df.sort_values(["incl", "n"], ascending=[False, False], na_position="last", kind="mergesort")
        elif sort_by == "n":
            df = df.sort_values("n", ascending=False, kind="mergesort")
        elif sort_by is not None:
            raise ValueError(f"Unknown sort key '{sort_by}'")
        return df.reset_index(drop=True)


# -------------------------------------------------------------------
# Construction
# -------------------------------------------------------------------

def binarize(memberships: np.ndarray) -> np.ndarray:
    """
    Crisp corner side for every membership: 1 above 0.5, 0 below.
    Callers must reject exact 0.5 values first.
    """
    return (memberships > AMBIGUOUS).astype(int)


def _check_ambiguous(X: np.ndarray, cases: Sequence[object], conditions: Sequence[str]) -> None:
    rows, cols = np.nonzero(X == AMBIGUOUS)
    if len(rows) == 0:
        return
    hits = [(cases[i], conditions[j]) for i, j in zip(rows, cols)]
    raise AmbiguousMembershipError(
        "Membership of exactly 0.5 cannot be assigned to a truth table corner: "
        + ", ".join(f"{case} in {cond}" for case, cond in hits),
        context={"cases": hits},
    ).add_suggestion("Adjust the crossover anchor of the affected condition")


def build_truth_table(
    calibrated: pd.DataFrame,
    conditions: Sequence[str],
    outcome: str,
    settings: TruthTableSettings,
    neg_out: bool = False,
) -> TruthTable:
    """
    Build the complete truth table (all 2^k corners) for the given conditions.
    """
    settings.validate()
    conditions = list(conditions)
    k = len(conditions)

    if k == 0:
        raise DataShapeError("At least one condition is required for a truth table")
    if k > settings.max_conditions:
        raise ConditionExplosionError(
            f"{k} conditions would require {2 ** k} corners; the limit is "
            f"{settings.max_conditions} conditions",
            context={"conditions": k, "max_conditions": settings.max_conditions},
        ).add_suggestion("Reduce the number of conditions or raise truth_table.max_conditions")

    missing = [c for c in conditions + [outcome] if c not in calibrated.columns]
    if missing:
        raise DataShapeError(f"Calibrated table lacks columns: {missing}")
    if calibrated.empty:
        raise DataShapeError("Calibrated table has no cases")

    memberships = calibrated[conditions].astype(float)
    X = memberships.to_numpy()
    Y = calibrated[outcome].astype(float).to_numpy()
    if neg_out:
        Y = 1.0 - Y
    if np.isnan(X).any() or np.isnan(Y).any():
        raise DataShapeError("Calibrated table contains missing memberships")

    cases = list(calibrated.index)
    _check_ambiguous(X, cases, conditions)

    bits = binarize(X)
    weights = 2 ** np.arange(k - 1, -1, -1)
    codes = bits @ weights

    members: Dict[int, List[int]] = defaultdict(list)
    for position, code in enumerate(codes):
        members[int(code)].append(position)

    rows: List[TruthTableRow] = []
    warnings: List[str] = []

    for code, configuration in enumerate(itertools.product((0, 1), repeat=k)):
        positions = members.get(code, [])
        row_cases = [cases[p] for p in positions]

        if not positions:
            rows.append(TruthTableRow(
                index=code + 1,
                configuration=configuration,
                cases=[],
                consistency=float("nan"),
                pri=float("nan"),
                coverage=float("nan"),
                status=RowStatus.REMAINDER,
            ))
            continue

        config_arr = np.array(configuration, dtype=bool)
        corner = np.min(np.where(config_arr, X, 1.0 - X), axis=1)

        incl = consistency_raw(corner, Y)
        pri = consistency_pri(corner, Y)
        cov = coverage_raw(corner, Y)

        passes = incl >= settings.incl_cut
        if settings.pri_cut is not None:
            passes = passes and pri >= settings.pri_cut
        status = RowStatus.POSITIVE if passes else RowStatus.NEGATIVE

        outcome_sides = set((Y[positions] > AMBIGUOUS).tolist())
        contradictory = len(outcome_sides) > 1

        row = TruthTableRow(
            index=code + 1,
            configuration=configuration,
            cases=row_cases,
            consistency=incl,
            pri=pri,
            coverage=cov,
            status=status,
            contradictory=contradictory,
        )
        rows.append(row)

        if len(positions) < settings.sparse_corner_cases:
            warnings.append(
                f"Corner {row.config_string} rests on {len(positions)} case(s): "
                + ", ".join(str(c) for c in row_cases)
            )
        if contradictory:
            warnings.append(
                f"Corner {row.config_string} is contradictory: its cases fall on both sides of the outcome"
            )

    table = TruthTable(
        conditions=conditions,
        outcome=outcome,
        rows=rows,
        settings=settings,
        memberships=memberships,
        outcome_membership=pd.Series(Y, index=calibrated.index, name=outcome),
        neg_out=neg_out,
        warnings=warnings,
    )

    logger.info(
        "Truth table for %s: %d corners, %d positive, %d negative, %d remainders",
        table.outcome_label,
        len(rows),
        len(table.positive()),
        len(table.negative()),
        len(table.remainders()),
    )
    if warnings:
        logger.warning("Truth table produced %d warning(s)", len(warnings))
    return table
