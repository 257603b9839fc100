# fsqca/exporters.py
"""
Export Utilities
----------------
Writes the artifacts of a finished run:

• calibrated table (CSV)
• truth table report (CSV)
• necessity tables (CSV)
• solutions (JSON)
• Markdown report
• Excel workbook with every table
• optional ZIP bundle
"""

import json
import logging
import math
import os
import zipfile
from datetime import datetime
from typing import Dict, List

import pandas as pd

from .pipeline import AnalysisResult

logger = logging.getLogger(__name__)


# ======================================================
# INTERNAL UTILS
# ======================================================

def _timestamp():
    """Returns timestamp for file naming."""
    return datetime.now().strftime("%Y-%m-%d_%H-%M-%S")


def _ensure_dir(path):
    """Ensures an output directory exists."""
    os.makedirs(path, exist_ok=True)


def _filename(output_path, name, ext, stamp):
    suffix = f"_{_timestamp()}" if stamp else ""
    return os.path.join(output_path, f"{name}{suffix}.{ext}")


def _json_safe(value):
    """NaN is not valid JSON; write it as null."""
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def _fmt(value, digits=3):
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"
    return f"{value:.{digits}f}"


# ======================================================
# BASIC EXPORTS
# ======================================================

def export_json(data, output_path, name="fsqca_export", stamp=False):
    _ensure_dir(output_path)
    filename = _filename(output_path, name, "json", stamp)
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(_json_safe(data), f, indent=2, ensure_ascii=False)
    return filename


def export_csv(df, output_path, name="fsqca_export", stamp=False, index=False):
    _ensure_dir(output_path)
    filename = _filename(output_path, name, "csv", stamp)
    df.to_csv(filename, index=index)
    return filename


def export_excel(sheets_dict, output_path, name="fsqca_results", stamp=False):
    """
    Exports multiple DataFrames into a single Excel workbook.

    Parameters
    ----------
    sheets_dict : dict
        { "SheetName": DataFrame }
    """
    _ensure_dir(output_path)
    filename = _filename(output_path, name, "xlsx", stamp)
    with pd.ExcelWriter(filename, engine="xlsxwriter") as writer:
        for sheet_name, df in sheets_dict.items():
            df.to_excel(writer, sheet_name=sheet_name[:31], index=False)
    return filename


def export_zip(file_list, output_path, name="fsqca_bundle", stamp=False):
    _ensure_dir(output_path)
    filename = _filename(output_path, name, "zip", stamp)
    with zipfile.ZipFile(filename, "w") as zipf:
        for file in file_list:
            if os.path.exists(file):
                zipf.write(file, arcname=os.path.basename(file))
    return filename


# ======================================================
# MARKDOWN REPORT
# ======================================================

def _markdown_table(df: pd.DataFrame) -> List[str]:
    if df.empty:
        return ["_none_"]
    header = "| " + " | ".join(str(c) for c in df.columns) + " |"
    rule = "|" + "|".join("---" for _ in df.columns) + "|"
    lines = [header, rule]
    for _, row in df.iterrows():
        cells = [_fmt(v) if isinstance(v, float) else str(v) for v in row.tolist()]
        lines.append("| " + " | ".join(cells) + " |")
    return lines


def render_report(result: AnalysisResult) -> str:
    """Plain-text (Markdown) report of a run."""
    config = result.config
    tt = result.truth_table
    lines = [f"# fsQCA report: {tt.outcome_label}", ""]

    lines.append("## Calibration")
    lines.extend(_markdown_table(result.calibration.thresholds_frame()))
    lines.append("")
    if result.calibration.ambiguous:
        for name, hits in result.calibration.ambiguous.items():
            lines.append(f"- Cases with membership = 0.5 in {name}: " + ", ".join(str(h.case) for h in hits))
    else:
        lines.append("No 0.5 scores in any calibrated set.")
    lines.append("")

    lines.append(f"## Necessity ({config.outcome.name})")
    lines.extend(_markdown_table(result.necessity))
    lines.append("")
    lines.append(f"## Necessity (~{config.outcome.name})")
    lines.extend(_markdown_table(result.necessity_negated))
    lines.append("")
    lines.append(
        f"## Necessary disjunctions (incl.cut={config.necessity.incl_cut}, "
        f"cov.cut={config.necessity.cov_cut}, ron.cut={config.necessity.ron_cut})"
    )
    lines.extend(_markdown_table(result.disjunctions))
    lines.append("")

    lines.append(f"## Truth table (incl.cut={config.truth_table.incl_cut})")
    lines.append(
        f"{len(tt.positive())} positive, {len(tt.negative())} negative, "
        f"{len(tt.remainders())} remainder rows of {len(tt)}."
    )
    lines.append("")
    lines.extend(_markdown_table(tt.to_frame(sort_by="incl", include_remainders=False)))
    lines.append("")

    for kind, solution in result.solutions.items():
        lines.append(f"## {kind.capitalize()} solution")
        if not solution.terms:
            lines.append("No terms found.")
            lines.append("")
            continue
        lines.append(f"`{solution.expression}`  →  {solution.outcome}")
        lines.append("")
        terms = pd.DataFrame([
            {
                "term": t.expression,
                "inclS": t.consistency,
                "PRI": t.pri,
                "covS": t.raw_coverage,
                "covU": t.unique_coverage,
                "cases": ", ".join(str(c) for c in t.cases),
            }
            for t in solution.terms
        ])
        lines.extend(_markdown_table(terms))
        lines.append("")
        lines.append(
            f"Solution: inclS {_fmt(solution.consistency)}, PRI {_fmt(solution.pri)}, "
            f"covS {_fmt(solution.coverage)}"
        )
        lines.append("")

    if result.warnings:
        lines.append("## Warnings")
        lines.extend(f"- {w}" for w in result.warnings)
        lines.append("")

    return "\n".join(lines)


def export_markdown(text, output_path, name="fsqca_report", stamp=False):
    _ensure_dir(output_path)
    filename = _filename(output_path, name, "md", stamp)
    with open(filename, "w", encoding="utf-8") as f:
        f.write(text)
    return filename


# ======================================================
# FULL RUN EXPORT
# ======================================================

def solutions_payload(result: AnalysisResult) -> Dict:
    return {
        "outcome": result.truth_table.outcome_label,
        "conditions": list(result.truth_table.conditions),
        "solutions": {kind: s.to_dict() for kind, s in result.solutions.items()},
        "config": result.config.to_dict(),
        "warnings": list(result.warnings),
    }


def export_analysis(result: AnalysisResult, output_path, stamp=False, bundle=False) -> Dict[str, str]:
    """
    Write every artifact of a finished run. Returns {artifact: path}.
    """
    calibrated = result.calibrated.reset_index()
    truth_table = result.truth_table.to_frame()
    necessity = pd.concat(
        [
            result.necessity.assign(outcome=result.config.outcome.name),
            result.necessity_negated.assign(outcome=f"~{result.config.outcome.name}"),
        ],
        ignore_index=True,
    )

    files = {
        "calibrated": export_csv(calibrated, output_path, "calibrated", stamp),
        "truth_table": export_csv(truth_table, output_path, "truth_table", stamp),
        "necessity": export_csv(necessity, output_path, "necessity", stamp),
        "solutions": export_json(solutions_payload(result), output_path, "solutions", stamp),
        "report": export_markdown(render_report(result), output_path, "report", stamp),
    }

    solution_rows = [
        {"solution": kind, **t.to_dict()}
        for kind, s in result.solutions.items()
        for t in s.terms
    ]
    solution_frame = pd.DataFrame(solution_rows).drop(columns=["literals"], errors="ignore")
    if "cases" in solution_frame.columns:
        solution_frame["cases"] = solution_frame["cases"].apply(", ".join)

    files["workbook"] = export_excel(
        {
            "Calibrated": calibrated,
            "Thresholds": result.calibration.thresholds_frame(),
            "Necessity": necessity,
            "Disjunctions": result.disjunctions,
            "Truth Table": truth_table,
            "Solutions": solution_frame,
        },
        output_path,
        "fsqca_results",
        stamp,
    )

    if bundle:
        files["bundle"] = export_zip(list(files.values()), output_path, "fsqca_bundle", stamp)

    for artifact, path in files.items():
        logger.info("Wrote %s: %s", artifact, path)
    return files
