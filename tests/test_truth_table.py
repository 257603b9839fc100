import numpy as np
import pandas as pd
import pytest

from fsqca.config import TruthTableSettings
from fsqca.exceptions import AmbiguousMembershipError, ConditionExplosionError, ConfigurationError, DataShapeError
from fsqca.truth_table import RowStatus, binarize, build_truth_table


def _random_calibrated(n_cases, conditions, seed=7):
    rng = np.random.default_rng(seed)
    data = {c: rng.uniform(0.05, 0.95, n_cases) for c in conditions}
    data["Y"] = rng.uniform(0.05, 0.95, n_cases)
    return pd.DataFrame(data, index=[f"case{i}" for i in range(n_cases)])


class TestCorners:
    """Corner enumeration and case assignment."""

    def test_all_corners_present(self, small_calibrated, tt_settings):
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings)
        assert len(tt) == 4
        assert [r.config_string for r in tt.rows] == ["00", "01", "10", "11"]
        assert [r.index for r in tt.rows] == [1, 2, 3, 4]

    def test_cases_land_in_their_corner(self, small_calibrated, tt_settings):
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings)
        by_config = {r.config_string: r.cases for r in tt.rows}
        assert by_config == {"00": [], "01": ["c3"], "10": ["c2"], "11": ["c1"]}

    def test_partition_of_cases(self, tt_settings):
        conditions = ["A", "B", "C", "D"]
        calibrated = _random_calibrated(40, conditions)
        tt = build_truth_table(calibrated, conditions, "Y", tt_settings)

        assigned = [c for r in tt.rows for c in r.cases]
        assert sorted(assigned) == sorted(calibrated.index)
        assert len(assigned) == len(set(assigned))
        assert tt.n_cases == 40

    def test_six_conditions_enumerate_64_corners(self):
        conditions = [f"X{i}" for i in range(6)]
        calibrated = _random_calibrated(12, conditions, seed=11)
        settings = TruthTableSettings(incl_cut=0.8, sparse_corner_cases=0)
        tt = build_truth_table(calibrated, conditions, "Y", settings)

        assert len(tt) == 64
        observed = {r.config_string for r in tt.rows if r.cases}
        assert len(tt.remainders()) == 64 - len(observed)
        for row in tt.remainders():
            assert row.n_cases == 0
            assert np.isnan(row.consistency)
        for row in tt.negative():
            assert row.n_cases > 0

    def test_binarize(self):
        assert binarize(np.array([0.1, 0.49, 0.51, 1.0])).tolist() == [0, 0, 1, 1]


class TestCornerParameters:
    """Sufficiency parameters and row classification."""

    def test_consistency_and_coverage(self, small_calibrated, tt_settings):
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings)
        rows = {r.config_string: r for r in tt.rows}

        assert rows["11"].consistency == pytest.approx(1.0)
        assert rows["11"].coverage == pytest.approx(0.6)
        assert rows["11"].pri == pytest.approx(1.0)
        assert rows["10"].consistency == pytest.approx(0.7 / 1.1)
        assert rows["01"].consistency == pytest.approx(1.0)

    def test_status(self, small_calibrated, tt_settings):
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings)
        rows = {r.config_string: r for r in tt.rows}

        assert rows["00"].status is RowStatus.REMAINDER
        assert rows["01"].status is RowStatus.POSITIVE
        assert rows["10"].status is RowStatus.NEGATIVE
        assert rows["11"].status is RowStatus.POSITIVE

    def test_negated_outcome(self, small_calibrated, tt_settings):
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings, neg_out=True)
        assert tt.outcome_label == "~Y"
        assert [r.config_string for r in tt.positive()] == ["10"]
        assert tt.positive()[0].consistency == pytest.approx(1.0 / 1.1)

    def test_pri_cut_demotes_row(self):
        calibrated = pd.DataFrame({"A": [0.9, 0.9], "Y": [0.8, 0.8]}, index=["p", "q"])

        loose = build_truth_table(calibrated, ["A"], "Y", TruthTableSettings(incl_cut=0.8, sparse_corner_cases=0))
        strict = build_truth_table(
            calibrated, ["A"], "Y", TruthTableSettings(incl_cut=0.8, pri_cut=0.9, sparse_corner_cases=0)
        )

        assert loose.rows[1].pri == pytest.approx(1.2 / 1.4)
        assert loose.rows[1].status is RowStatus.POSITIVE
        assert strict.rows[1].status is RowStatus.NEGATIVE

    def test_contradictory_corner_warns(self, tt_settings):
        calibrated = pd.DataFrame({"A": [0.8, 0.9], "Y": [0.9, 0.2]}, index=["p", "q"])
        tt = build_truth_table(calibrated, ["A"], "Y", tt_settings)
        assert tt.rows[1].contradictory is True
        assert any("contradictory" in w for w in tt.warnings)

    def test_sparse_corner_warns(self, small_calibrated):
        settings = TruthTableSettings(incl_cut=0.8, sparse_corner_cases=2)
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", settings)
        assert len([w for w in tt.warnings if "rests on 1 case" in w]) == 3


class TestTruthTableErrors:
    """Invalid inputs abort the build."""

    def test_ambiguous_membership(self, small_calibrated, tt_settings):
        small_calibrated.loc["c2", "B"] = 0.5
        with pytest.raises(AmbiguousMembershipError) as exc_info:
            build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings)
        assert exc_info.value.context["cases"] == [("c2", "B")]

    def test_too_many_conditions(self):
        calibrated = _random_calibrated(5, ["A", "B", "C"])
        settings = TruthTableSettings(incl_cut=0.8, max_conditions=2)
        with pytest.raises(ConditionExplosionError):
            build_truth_table(calibrated, ["A", "B", "C"], "Y", settings)

    def test_no_conditions(self, small_calibrated, tt_settings):
        with pytest.raises(DataShapeError):
            build_truth_table(small_calibrated, [], "Y", tt_settings)

    def test_missing_column(self, small_calibrated, tt_settings):
        with pytest.raises(DataShapeError, match="lacks columns"):
            build_truth_table(small_calibrated, ["A", "Z"], "Y", tt_settings)

    def test_invalid_cutoff(self, small_calibrated):
        with pytest.raises(ConfigurationError):
            build_truth_table(small_calibrated, ["A", "B"], "Y", TruthTableSettings(incl_cut=1.2))


class TestToFrame:
    """Report form of the truth table."""

    def test_columns(self, small_calibrated, tt_settings):
        frame = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings).to_frame()
        assert list(frame.columns) == [
            "row", "A", "B", "OUT", "n", "incl", "PRI", "cov", "status", "contradictory", "cases"
        ]
        assert frame["OUT"].tolist() == ["?", "1", "0", "1"]

    def test_sorted_by_consistency(self, small_calibrated, tt_settings):
        frame = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings).to_frame(sort_by="incl")
        assert frame["row"].tolist()[-2:] == [3, 1]

    def test_without_remainders(self, small_calibrated, tt_settings):
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings)
        frame = tt.to_frame(include_remainders=False)
        assert len(frame) == 3
        assert "remainder" not in frame["status"].tolist()

    def test_unknown_sort_key(self, small_calibrated, tt_settings):
        tt = build_truth_table(small_calibrated, ["A", "B"], "Y", tt_settings)
        with pytest.raises(ValueError):
            tt.to_frame(sort_by="cases")
