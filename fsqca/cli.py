"""Command line entry point: ``psd-fsqca``."""

import argparse
import logging
import sys
from typing import List, Optional

from fsqca.calibration import resolve_calibrations
from fsqca.config import load_config
from fsqca.exceptions import FsqcaError
from fsqca.exporters import export_analysis
from fsqca.loader import load_cases
from fsqca.logging_utils import setup_logging
from fsqca.pipeline import run_analysis

logger = logging.getLogger("fsqca.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psd-fsqca",
        description=(
            "Fuzzy-set QCA of public service delivery: calibrate indicator "
            "scores, analyse necessity, build and minimize the truth table."
        ),
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="Run the full analysis and write the reports")
    run_p.add_argument("-i", "--input", required=True, help="Case table (.csv, .txt, .xlsx)")
    run_p.add_argument("-c", "--config", required=True, help="Analysis configuration (JSON)")
    run_p.add_argument("-o", "--output-dir", required=True, help="Directory for the output artifacts")
    run_p.add_argument("--sheet", help="Excel sheet name or index (default: first sheet)")
    run_p.add_argument("--delimiter", help="CSV delimiter (default: auto-detect)")

    output_group = run_p.add_argument_group("Output Options")
    output_group.add_argument(
        "--timestamp",
        action="store_true",
        help="Append a timestamp to every output file name.",
    )
    output_group.add_argument(
        "--zip",
        action="store_true",
        help="Also bundle every artifact into a ZIP archive.",
    )

    check_p = sub.add_parser("check-config", help="Validate a configuration file and exit")
    check_p.add_argument("-c", "--config", required=True, help="Analysis configuration (JSON)")

    for p in (run_p, check_p):
        debug_group = p.add_argument_group("Debug Options")
        debug_group.add_argument("--debug", action="store_true", help="Verbose logging.")
        debug_group.add_argument("--log-file", metavar="PATH", help="Also write logs to this file.")

    return parser


def _sheet(value: Optional[str]):
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def _run(args) -> int:
    config = load_config(args.config)
    raw = load_cases(args.input, sheet=_sheet(args.sheet), delimiter=args.delimiter, case_id=config.case_id)
    result = run_analysis(raw, config)
    files = export_analysis(result, args.output_dir, stamp=args.timestamp, bundle=args.zip)

    for kind, solution in result.solutions.items():
        print(f"{kind:>13}: {solution.expression or '(no solution)'}")
    for warning in result.warnings:
        logger.warning(warning)
    print(f"Reports written to {args.output_dir} ({len(files)} files)")
    return 0


def _check_config(args) -> int:
    config = load_config(args.config)
    calibrations = resolve_calibrations(config)
    for name, cal in calibrations.items():
        low, cross, high = cal.thresholds.as_tuple()
        print(f"{name:<24} {cal.source:<12} {cal.method:<9} {low:g} / {cross:g} / {high:g}")
    print("Configuration OK")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level="DEBUG" if args.debug else "INFO", log_file=args.log_file)

    handlers = {"run": _run, "check-config": _check_config}
    try:
        return handlers[args.cmd](args)
    except FsqcaError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
