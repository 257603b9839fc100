import numpy as np
import pytest

from fsqca.config import ThresholdTriplet
from fsqca.exceptions import ConfigurationError
from fsqca.fuzzy_logic import calibrate, calibrate_linear, calibrate_logistic, find_ambiguous, negate


PSD_OUTCOME = ThresholdTriplet(0.71, 0.77, 0.83)


class TestThresholdTriplet:
    """Anchor ordering is enforced on construction."""

    def test_valid_triplet(self):
        t = ThresholdTriplet(80, 94.5, 98)
        assert t.as_tuple() == (80, 94.5, 98)

    @pytest.mark.parametrize("values", [(3, 2, 1), (1, 1, 2), (1, 2, 2), (2, 1, 3)])
    def test_unordered_anchors_rejected(self, values):
        with pytest.raises(ConfigurationError) as exc_info:
            ThresholdTriplet(*values)
        assert "exclusion < crossover < inclusion" in str(exc_info.value)

    def test_non_finite_anchor_rejected(self):
        with pytest.raises(ConfigurationError):
            ThresholdTriplet(0, float("nan"), 1)

    def test_from_sequence_requires_three_values(self):
        with pytest.raises(ConfigurationError):
            ThresholdTriplet.from_sequence([1, 2])


class TestLogisticCalibration:
    """Anchors, saturation and shape of the default calibration."""

    def test_full_membership_anchor(self):
        assert calibrate([0.83], PSD_OUTCOME)[0] == 1.0

    def test_crossover_anchor(self):
        assert calibrate([0.77], PSD_OUTCOME)[0] == 0.5

    def test_non_membership_anchor(self):
        assert calibrate([0.71], PSD_OUTCOME)[0] == 0.0

    def test_saturates_outside_anchors(self):
        result = calibrate([0.1, 0.7, 0.9, 5.0], PSD_OUTCOME)
        assert result.tolist() == [0.0, 0.0, 1.0, 1.0]

    def test_monotone_non_decreasing(self):
        t = ThresholdTriplet(60, 71.5, 93)
        x = np.linspace(40, 110, 701)
        m = calibrate(x, t)
        assert np.all(np.diff(m) >= 0)
        assert m.min() >= 0.0 and m.max() <= 1.0

    def test_half_only_at_crossover(self):
        t = ThresholdTriplet(60, 70, 80)
        x = np.array([61, 65, 69.9, 70.1, 75, 79])
        assert len(find_ambiguous(calibrate(x, t))) == 0

    def test_s_curve_steepest_around_crossover(self):
        t = ThresholdTriplet(0, 50, 100)
        near_cross = calibrate([55], t)[0] - calibrate([50], t)[0]
        near_full = calibrate([100], t)[0] - calibrate([95], t)[0]
        near_zero = calibrate([5], t)[0] - calibrate([0], t)[0]
        assert near_cross > near_full
        assert near_cross > near_zero

    def test_asymmetric_anchors_scale_each_side(self):
        t = ThresholdTriplet(80, 94.5, 98)
        below = calibrate_logistic([87.25], t)[0]
        above = calibrate_logistic([96.25], t)[0]
        assert below == pytest.approx(1 - above)

    def test_accepts_plain_sequence(self):
        assert calibrate([50], (0, 50, 100))[0] == 0.5

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError):
            calibrate([1.0], PSD_OUTCOME, method="cubic")


def test_linear_calibration_midpoints():
    t = ThresholdTriplet(0, 50, 100)
    result = calibrate_linear([0, 25, 50, 75, 100, 120], t)
    assert result.tolist() == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0, 1.0])


def test_find_ambiguous_positions():
    assert find_ambiguous([0.2, 0.5, 0.51, 0.5]).tolist() == [1, 3]


def test_negate():
    assert negate([0.0, 0.25, 1.0]).tolist() == [1.0, 0.75, 0.0]
