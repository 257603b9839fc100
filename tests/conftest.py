import copy

import pandas as pd
import pytest

from fsqca.config import TruthTableSettings, config_from_dict


BASE_CONFIG = {
    "case_id": "country",
    "outcome": {"name": "fs_success", "source": "dv", "thresholds": [0.2, 0.5, 0.8]},
    "conditions": ["fs_help", "fs_eid", "fs_avail"],
    "calibration": {
        "fs_help": {"source": "help", "thresholds": [0, 50, 100]},
        "fs_eid": {"source": "eid", "thresholds": [0, 50, 100]},
        "fs_avail": {"source": "avail", "thresholds": [0, 50, 100]},
    },
    "truth_table": {"incl_cut": 0.8, "sparse_corner_cases": 2},
    "necessity": {"incl_cut": 0.9, "cov_cut": 0.6, "ron_cut": 0.6, "max_order": 2},
    "coverage_cut": 0.1,
}


@pytest.fixture
def config_dict():
    return copy.deepcopy(BASE_CONFIG)


@pytest.fixture
def config(config_dict):
    return config_from_dict(config_dict)


@pytest.fixture
def raw_df():
    return pd.DataFrame({
        "country": ["Sweden", "Denmark", "Hungary", "Croatia", "Malta", "France", "Romania", "Greece"],
        "dv": [0.9, 0.85, 0.8, 0.6, 0.3, 0.1, 0.15, 0.35],
        "help": [90, 85, 70, 60, 20, 10, 30, 40],
        "eid": [80, 75, 90, 30, 70, 20, 10, 60],
        "avail": [70, 20, 60, 80, 30, 90, 10, 40],
    })


@pytest.fixture
def tt_settings():
    return TruthTableSettings(incl_cut=0.8, sparse_corner_cases=0)


@pytest.fixture
def small_calibrated():
    """Three cases, two conditions: corners 11, 10 and 01 observed, 00 empty."""
    return pd.DataFrame(
        {
            "A": [0.9, 0.7, 0.2],
            "B": [0.8, 0.2, 0.6],
            "Y": [0.9, 0.3, 0.8],
        },
        index=pd.Index(["c1", "c2", "c3"], name="country"),
    )
