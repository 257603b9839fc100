# truth_table.py
"""
Truth Table page.

REQUIRES:
    st.session_state['config']       -> AnalysisConfig
    st.session_state['calibration']  -> CalibrationResult

EXPORTS:
    st.session_state['truth_table']  -> TruthTable
"""

from dataclasses import replace

import streamlit as st

from fsqca.exceptions import FsqcaError
from fsqca.truth_table import build_truth_table


def show():
    st.title("Truth Table")

    config = st.session_state.get("config")
    calibration = st.session_state.get("calibration")
    if config is None or calibration is None:
        st.warning("Calibrate your conditions first in 'Calibration'.")
        return

    st.subheader("Options")

    colA, colB, colC = st.columns(3)
    with colA:
        incl_cut = st.slider("Consistency cutoff (incl.cut)", 0.0, 1.0, float(config.truth_table.incl_cut), 0.01)
    with colB:
        use_pri = st.checkbox("Apply PRI cutoff", value=config.truth_table.pri_cut is not None)
        pri_cut = st.slider("PRI cutoff", 0.0, 1.0, float(config.truth_table.pri_cut or 0.5), 0.01, disabled=not use_pri)
    with colC:
        neg_out = st.checkbox("Negated outcome", value=config.neg_out)
        show_remainders = st.checkbox("Show remainders", value=False)

    settings = replace(config.truth_table, incl_cut=incl_cut, pri_cut=pri_cut if use_pri else None)

    try:
        tt = build_truth_table(
            calibration.calibrated,
            config.conditions,
            config.outcome.name,
            settings,
            neg_out=neg_out,
        )
    except FsqcaError as e:
        st.error(f"{type(e).__name__}: {e}")
        st.session_state.pop("truth_table", None)
        return

    st.session_state["truth_table"] = tt
    st.session_state["config"] = replace(config, truth_table=settings, neg_out=neg_out)
    st.session_state.pop("solutions", None)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Corners", len(tt))
    with col2:
        st.metric("Positive", len(tt.positive()))
    with col3:
        st.metric("Negative", len(tt.negative()))
    with col4:
        st.metric("Remainders", len(tt.remainders()))

    frame = tt.to_frame(sort_by="incl", include_remainders=show_remainders)
    st.dataframe(frame, use_container_width=True)

    if tt.warnings:
        with st.expander(f"Warnings ({len(tt.warnings)})"):
            for w in tt.warnings:
                st.markdown(f"- {w}")

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        csv = tt.to_frame().to_csv(index=False).encode("utf-8")
        st.download_button("Download CSV", csv, "truth_table.csv", "text/csv")
    with col2:
        json_str = tt.to_frame().to_json(orient="records", indent=2)
        st.download_button("Download JSON", json_str, "truth_table.json", "application/json")

    st.info("Continue with 'QCA Solutions' for the Boolean minimization.")


if __name__ == "__main__":
    show()
