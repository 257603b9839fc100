import json
from pathlib import Path

import pandas as pd
import streamlit as st

from fsqca.config import config_from_dict
from fsqca.exceptions import FsqcaError
from fsqca.loader import read_delimited, restore_numeric

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "config" / "psd_thresholds.json"

# ============================================================
#  START PAGE: CONFIGURATION AND DATA INPUT
# ============================================================

def _read_upload(uploaded_file, delimiter, case_id):
    """Case labels stay text; the other columns are parsed as numbers."""
    file_ext = uploaded_file.name.split('.')[-1].lower()
    content_bytes = uploaded_file.getvalue()

    if file_ext in ['csv', 'txt']:
        df = read_delimited(content_bytes, delimiter, dtype=str)
    elif file_ext == 'xlsx':
        df = pd.read_excel(uploaded_file, dtype=str)
    else:
        raise ValueError(f"Unsupported file format: .{file_ext}")

    df.columns = [str(c).strip() for c in df.columns]
    return restore_numeric(df, keep_text=case_id)


def _load_config():
    config_file = st.file_uploader("Configuration (JSON)", type=["json"], key="config_uploader")
    use_default = st.checkbox(f"Use bundled configuration ({DEFAULT_CONFIG.name})", value=config_file is None)

    raw_config = None
    if config_file is not None:
        try:
            raw_config = json.loads(config_file.getvalue().decode("utf-8"))
        except json.JSONDecodeError as e:
            st.error(f"Configuration file is not valid JSON: {e}")
            return None
    elif use_default and DEFAULT_CONFIG.exists():
        with open(DEFAULT_CONFIG, "r", encoding="utf-8") as f:
            raw_config = json.load(f)

    if raw_config is None:
        st.info("Upload a configuration file to continue.")
        return None

    try:
        return config_from_dict(raw_config)
    except FsqcaError as e:
        st.error(f"Invalid configuration: {e}")
        return None


def show():
    st.title("Configuration & Data Input")

    # ============================================================
    # 1. ANALYSIS CONFIGURATION
    # ============================================================

    st.markdown("## Analysis Configuration")
    st.caption(
        "Thresholds, cutoffs and the condition list are read from a JSON file. "
        "Every condition needs its own threshold triplet."
    )

    config = _load_config()
    if config is None:
        return

    st.session_state["config"] = config

    st.info(f"""
    **Configuration Summary:**
    - **Case identifier:** {config.case_id}
    - **Outcome:** {config.outcome.name} (from `{config.outcome.source}`)
    - **Conditions:** {', '.join(config.conditions)}
    - **Truth table incl.cut:** {config.truth_table.incl_cut}
    """)

    with st.expander("Full configuration"):
        st.json(config.to_dict())

    # ============================================================
    # 2. UPLOAD DATA
    # ============================================================

    st.markdown("---")
    col1, col2 = st.columns([1, 2])

    with col1:
        st.markdown("#### CSV Settings")
        delimiter_option = st.selectbox(
            "CSV Delimiter:",
            ["Auto-detect", "Comma (,)", "Semicolon (;)", "Tab", "Pipe (|)"],
            key="delimiter_option"
        )
        delimiter_map = {
            "Auto-detect": None,
            "Comma (,)": ",",
            "Semicolon (;)": ";",
            "Tab": "\t",
            "Pipe (|)": "|",
        }
        delimiter = delimiter_map[delimiter_option]

    with col2:
        st.markdown("#### Case Table")
        uploaded_file = st.file_uploader(
            "One row per country, one column per raw indicator",
            type=["csv", "txt", "xlsx"],
            key="file_uploader"
        )

    if uploaded_file is not None:
        try:
            df = _read_upload(uploaded_file, delimiter, config.case_id)
        except Exception as e:
            st.error(f"Error reading file: {e}")
            return

        st.session_state["raw_df"] = df
        st.success(f"File loaded: **{uploaded_file.name}**")

        c1, c2, c3 = st.columns(3)
        with c1:
            st.metric("Cases", df.shape[0])
        with c2:
            st.metric("Columns", df.shape[1])
        with c3:
            st.metric("Missing Values", int(df.isnull().sum().sum()))

        st.dataframe(df.head(30), use_container_width=True)

    if st.session_state.get("raw_df") is not None:
        st.success("Data and configuration ready. Continue with 'Calibration'.")


if __name__ == "__main__":
    show()
