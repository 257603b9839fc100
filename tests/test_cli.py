import json
import logging
import os

import pandas as pd
import pytest

from fsqca.cli import main
from fsqca.exceptions import DataShapeError
from fsqca.loader import load_cases, read_delimited


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("fsqca")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


@pytest.fixture
def inputs(tmp_path, raw_df, config_dict):
    data_path = tmp_path / "cases.csv"
    raw_df.to_csv(data_path, index=False)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(config_dict), encoding="utf-8")
    return data_path, config_path


class TestRunCommand:
    """psd-fsqca run"""

    def test_success(self, inputs, tmp_path, capsys):
        data_path, config_path = inputs
        out = tmp_path / "out"

        code = main(["run", "-i", str(data_path), "-c", str(config_path), "-o", str(out)])

        assert code == 0
        for name in ("calibrated.csv", "truth_table.csv", "solutions.json", "necessity.csv", "report.md"):
            assert (out / name).exists()
        stdout = capsys.readouterr().out
        assert "complex:" in stdout
        assert "Reports written to" in stdout

    def test_zip_bundle(self, inputs, tmp_path):
        data_path, config_path = inputs
        out = tmp_path / "out"
        code = main(["run", "-i", str(data_path), "-c", str(config_path), "-o", str(out), "--zip"])
        assert code == 0
        assert (out / "fsqca_bundle.zip").exists()

    def test_missing_calibration_fails_without_output(self, inputs, tmp_path, config_dict):
        data_path, config_path = inputs
        del config_dict["calibration"]["fs_avail"]
        config_path.write_text(json.dumps(config_dict), encoding="utf-8")
        out = tmp_path / "out"

        code = main(["run", "-i", str(data_path), "-c", str(config_path), "-o", str(out)])

        assert code == 1
        assert not out.exists()

    def test_missing_input(self, inputs, tmp_path):
        _, config_path = inputs
        code = main(["run", "-i", str(tmp_path / "absent.csv"), "-c", str(config_path), "-o", str(tmp_path)])
        assert code == 1

    def test_log_file(self, inputs, tmp_path):
        data_path, config_path = inputs
        log_path = tmp_path / "logs" / "run.log"
        code = main([
            "run", "-i", str(data_path), "-c", str(config_path), "-o", str(tmp_path / "out"),
            "--log-file", str(log_path),
        ])
        assert code == 0
        assert "Truth table for fs_success" in log_path.read_text(encoding="utf-8")

    def test_zero_padded_case_ids_preserved(self, tmp_path, raw_df, config_dict):
        codes = ["040", "056", "100", "191", "470", "250", "642", "300"]
        raw_df["country"] = codes
        data_path = tmp_path / "cases.csv"
        raw_df.to_csv(data_path, index=False)
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(config_dict), encoding="utf-8")
        out = tmp_path / "out"

        code = main(["run", "-i", str(data_path), "-c", str(config_path), "-o", str(out)])

        assert code == 0
        calibrated = pd.read_csv(out / "calibrated.csv", dtype=str)
        assert calibrated["country"].tolist() == codes
        truth_table = pd.read_csv(out / "truth_table.csv", dtype=str, keep_default_na=False)
        listed = {c for cell in truth_table["cases"] if cell for c in cell.split(", ")}
        assert listed == set(codes)

    def test_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "-i", "cases.csv"])
        assert exc_info.value.code == 2


class TestCheckConfigCommand:
    """psd-fsqca check-config"""

    def test_valid(self, inputs, capsys):
        _, config_path = inputs
        assert main(["check-config", "-c", str(config_path)]) == 0
        stdout = capsys.readouterr().out
        assert "fs_help" in stdout
        assert "Configuration OK" in stdout

    def test_missing_file(self, tmp_path):
        assert main(["check-config", "-c", str(tmp_path / "absent.json")]) == 1

    def test_missing_calibration(self, inputs, config_dict):
        _, config_path = inputs
        del config_dict["calibration"]["fs_eid"]
        config_path.write_text(json.dumps(config_dict), encoding="utf-8")
        assert main(["check-config", "-c", str(config_path)]) == 1


    def test_scalar_triplet_reported(self, inputs, config_dict):
        _, config_path = inputs
        config_dict["calibration"]["fs_eid"]["thresholds"] = 50
        config_path.write_text(json.dumps(config_dict), encoding="utf-8")
        assert main(["check-config", "-c", str(config_path)]) == 1

    def test_text_integer_setting_reported(self, inputs, config_dict):
        _, config_path = inputs
        config_dict["necessity"]["max_order"] = "two"
        config_path.write_text(json.dumps(config_dict), encoding="utf-8")
        assert main(["check-config", "-c", str(config_path)]) == 1

class TestLoader:
    """Reading case tables."""

    def test_semicolon_detected(self):
        df = read_delimited(b"country;dv;help\nSweden;0.9;90\nMalta;0.3;20\n")
        assert list(df.columns) == ["country", "dv", "help"]
        assert len(df) == 2

    def test_latin1_bytes(self):
        df = read_delimited("country,dv\nEspaña,0.5\nMalta,0.3\n".encode("latin-1"))
        assert df.loc[0, "country"] == "España"

    def test_excel_round(self, tmp_path, raw_df):
        path = tmp_path / "cases.xlsx"
        raw_df.to_excel(path, index=False)
        df = load_cases(path)
        assert df["country"].tolist() == raw_df["country"].tolist()

    def test_column_names_stripped(self, tmp_path):
        path = tmp_path / "cases.csv"
        path.write_text(" country , dv \nSweden,0.9\nMalta,0.3\n", encoding="utf-8")
        assert list(load_cases(path).columns) == ["country", "dv"]

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "cases.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(DataShapeError, match="Unsupported"):
            load_cases(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataShapeError, match="not found"):
            load_cases(os.path.join(str(tmp_path), "absent.csv"))

    def test_legacy_excel_rejected(self, tmp_path):
        path = tmp_path / "cases.xls"
        path.write_bytes(b"\xd0\xcf\x11\xe0")
        with pytest.raises(DataShapeError, match="Unsupported"):
            load_cases(path)

    def test_case_id_kept_as_text(self, tmp_path):
        path = tmp_path / "cases.csv"
        path.write_text("country,dv,help\n040,0.9,90\n056,0.3,20\n", encoding="utf-8")
        df = load_cases(path, case_id="country")
        assert df["country"].tolist() == ["040", "056"]
        assert pd.api.types.is_numeric_dtype(df["dv"])
        assert pd.api.types.is_numeric_dtype(df["help"])

    def test_case_id_kept_as_text_in_excel(self, tmp_path):
        path = tmp_path / "cases.xlsx"
        pd.DataFrame({"country": ["040", "056"], "dv": [0.9, 0.3]}).to_excel(path, index=False)
        df = load_cases(path, case_id="country")
        assert df["country"].tolist() == ["040", "056"]
        assert df["dv"].tolist() == [0.9, 0.3]
