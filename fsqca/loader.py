# fsqca/loader.py
"""
Reading the raw case table from CSV/TXT or Excel files.
"""

import io
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .exceptions import DataShapeError

logger = logging.getLogger(__name__)

ENCODINGS = ("utf-8", "latin-1", "cp1252")
TEXT_EXTENSIONS = ("csv", "txt")
EXCEL_EXTENSIONS = ("xlsx",)


def decode_bytes(content: bytes) -> str:
    """Decode file content trying the common encodings in turn."""
    for encoding in ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode("utf-8", errors="ignore")


def read_delimited(
    content: Union[bytes, str],
    delimiter: Optional[str] = None,
    dtype=None,
) -> pd.DataFrame:
    """
    Parse delimited text. Without a delimiter, or when the given one yields
    a single column, pandas' sniffer picks it.
    """
    text = decode_bytes(content) if isinstance(content, bytes) else content

    if delimiter:
        try:
            df = pd.read_csv(io.StringIO(text), delimiter=delimiter, engine="python", dtype=dtype)
            if df.shape[1] > 1:
                return df
            logger.warning(
                "Only %d column detected with delimiter '%s'; trying auto-detection",
                df.shape[1],
                delimiter,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError):
            logger.warning("Delimiter '%s' failed; trying auto-detection", delimiter)

    return pd.read_csv(io.StringIO(text), sep=None, engine="python", dtype=dtype)


def restore_numeric(df: pd.DataFrame, keep_text: str) -> pd.DataFrame:
    """
    Convert every column read as text back to numbers where all of its
    values parse, except ``keep_text``, whose labels stay verbatim.
    """
    df = df.copy()
    for col in df.columns:
        if col == keep_text:
            continue
        try:
            df[col] = pd.to_numeric(df[col])
        except (TypeError, ValueError):
            logger.debug("Column '%s' kept as text", col)
    return df


def load_cases(
    path: Union[str, Path],
    sheet: Optional[Union[str, int]] = None,
    delimiter: Optional[str] = None,
    case_id: Optional[str] = None,
) -> pd.DataFrame:
    """
    Load one row per case from ``path``.

    Column names are kept verbatim; only surrounding whitespace is stripped.
    With ``case_id`` given, that column's labels are kept exactly as written
    (e.g. "040" stays "040") and the other columns are parsed as numbers
    where possible.
    """
    path = Path(path)
    ext = path.suffix.lower().lstrip(".")
    dtype = str if case_id else None

    try:
        if ext in TEXT_EXTENSIONS:
            with open(path, "rb") as f:
                df = read_delimited(f.read(), delimiter, dtype=dtype)
        elif ext in EXCEL_EXTENSIONS:
            with open(path, "rb") as f:
                df = pd.read_excel(f, sheet_name=sheet if sheet is not None else 0, dtype=dtype)
        else:
            raise DataShapeError(f"Unsupported file format: .{ext}").add_suggestion(
                "Use a .csv, .txt or .xlsx file"
            )
    except FileNotFoundError as e:
        raise DataShapeError(f"Input file not found: {path}") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        raise DataShapeError(f"Could not read {path}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    if df.empty:
        raise DataShapeError(f"Input file has no rows: {path}")
    if case_id:
        df = restore_numeric(df, keep_text=case_id)

    logger.info("Loaded %d cases x %d columns from %s", df.shape[0], df.shape[1], path)
    return df
