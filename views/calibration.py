# calibration.py
"""
Calibration page: per-condition threshold triplets and the calibrated table.
"""

from dataclasses import replace

import streamlit as st

from fsqca.calibration import build_condition_sets
from fsqca.config import ThresholdTriplet
from fsqca.exceptions import FsqcaError


def _edit_triplet(cal, key_prefix):
    """Number inputs prefilled with the configured anchors."""
    low, cross, high = cal.thresholds.as_tuple()
    col_f1, col_f2, col_f3 = st.columns(3)
    with col_f1:
        low = st.number_input("Full non-membership", value=float(low), key=f"{key_prefix}_fn", format="%.4f")
    with col_f2:
        cross = st.number_input("Crossover (0.5)", value=float(cross), key=f"{key_prefix}_cx", format="%.4f")
    with col_f3:
        high = st.number_input("Full membership", value=float(high), key=f"{key_prefix}_fm", format="%.4f")
    return replace(cal, thresholds=ThresholdTriplet(low, cross, high))


def show():
    st.title("Condition Calibration")

    raw_df = st.session_state.get("raw_df")
    config = st.session_state.get("config")
    if raw_df is None or config is None:
        st.error("Missing data or configuration. Go to 'Start' first.")
        return

    # ============================================
    # THRESHOLDS
    # ============================================
    st.subheader("Threshold Triplets")

    try:
        st.markdown(f"#### {config.outcome.name} (outcome, from `{config.outcome.source}`)")
        outcome = _edit_triplet(config.outcome, "outcome")

        calibrations = dict(config.calibrations)
        for cond in config.conditions:
            if cond not in calibrations:
                continue
            cal = calibrations[cond]
            st.markdown(f"#### {cond} (from `{cal.source}`)")
            if cal.source in raw_df.columns:
                stats = raw_df[cal.source].describe()
                st.caption(f"Min: {stats['min']:.2f} | Med: {stats['50%']:.2f} | Max: {stats['max']:.2f}")
            calibrations[cond] = _edit_triplet(cal, f"cal_{cond}")
    except FsqcaError as e:
        st.error(str(e))
        return

    config = replace(config, outcome=outcome, calibrations=calibrations)

    # ============================================
    # APPLY
    # ============================================
    st.divider()
    if st.button("Apply Calibration", type="primary", use_container_width=True):
        try:
            result = build_condition_sets(raw_df, config)
        except FsqcaError as e:
            st.error(f"{type(e).__name__}: {e}")
            return

        st.session_state["config"] = config
        st.session_state["calibration"] = result
        for key in ["truth_table", "solutions", "analysis"]:
            st.session_state.pop(key, None)
        st.success("Calibration applied")

    result = st.session_state.get("calibration")
    if result is None:
        return

    st.subheader("Calibrated Table")
    st.dataframe(result.calibrated, use_container_width=True)

    st.subheader("Ambiguity Check")
    if result.ambiguous:
        for name, hits in result.ambiguous.items():
            cases = ", ".join(
                f"{h.case} (raw {h.raw_value:g}{', at crossover' if h.at_crossover else ''})" for h in hits
            )
            st.warning(f"Cases with membership = 0.5 in {name}: {cases}")
    else:
        st.success("No 0.5 scores in any calibrated set.")

    csv = result.calibrated.reset_index().to_csv(index=False).encode("utf-8")
    st.download_button("Download calibrated CSV", csv, "calibrated.csv", "text/csv")

    st.info("Calibration ready. Continue with 'Necessity' or 'Truth Table'.")


if __name__ == "__main__":
    show()
