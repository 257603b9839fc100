# report_generator.py
"""
Reports page: runs the full pipeline on the current data and configuration
and exports every artifact.
"""

from pathlib import Path

import streamlit as st

from fsqca.exceptions import FsqcaError
from fsqca.exporters import export_analysis, render_report
from fsqca.pipeline import run_analysis

EXPORT_DIR = "exports"


def show():
    st.title("Reports")

    raw_df = st.session_state.get("raw_df")
    config = st.session_state.get("config")
    if raw_df is None or config is None:
        st.error("Missing data or configuration. Go to 'Start' first.")
        return

    st.markdown(
        "Runs calibration, necessity analysis, truth table and minimization "
        "with the current configuration, then writes every report."
    )

    output_dir = st.text_input("Output directory", value=EXPORT_DIR)
    bundle = st.checkbox("Also create a ZIP bundle", value=True)

    if st.button("Generate Reports", type="primary", use_container_width=True):
        try:
            result = run_analysis(raw_df, config)
            files = export_analysis(result, output_dir, stamp=True, bundle=bundle)
        except FsqcaError as e:
            st.error(f"{type(e).__name__}: {e}")
            return

        st.session_state["analysis"] = result
        st.session_state["report_files"] = files
        st.success(f"{len(files)} files written to {output_dir}")

    result = st.session_state.get("analysis")
    files = st.session_state.get("report_files")
    if result is None:
        return

    with st.expander("Report preview", expanded=True):
        st.markdown(render_report(result))

    if files:
        for artifact in ("report", "workbook", "bundle"):
            path = files.get(artifact)
            if path and Path(path).exists():
                with open(path, "rb") as f:
                    st.download_button(
                        f"Download {Path(path).name}",
                        f.read(),
                        Path(path).name,
                        key=f"dl_{artifact}",
                    )


if __name__ == "__main__":
    show()
