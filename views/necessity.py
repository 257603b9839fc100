"""
Necessity page: single conditions, their negations and necessary disjunctions.
"""

from dataclasses import replace

import streamlit as st

from fsqca.exceptions import FsqcaError
from fsqca.necessity import necessary_disjunctions, necessity_fit


def show():
    st.title("Necessity Analysis")

    config = st.session_state.get("config")
    calibration = st.session_state.get("calibration")
    if config is None or calibration is None:
        st.warning("Calibrate your conditions first in 'Calibration'.")
        return

    calibrated = calibration.calibrated
    outcome = config.outcome.name
    cut = config.necessity.incl_cut

    tab_out, tab_neg = st.tabs([outcome, f"~{outcome}"])
    for tab, neg_out in ((tab_out, False), (tab_neg, True)):
        with tab:
            fit = necessity_fit(calibrated, config.conditions, outcome, neg_out=neg_out)
            st.dataframe(fit.round(3), use_container_width=True)
            necessary = fit[fit["inclN"] >= cut]["condition"].tolist()
            if necessary:
                st.success(f"Necessary at inclN ≥ {cut}: {', '.join(necessary)}")
            else:
                st.info(f"No single condition reaches inclN ≥ {cut}.")

    # ============================================================
    # Necessary disjunctions
    # ============================================================
    st.markdown("---")
    st.subheader("Necessary Disjunctions")

    colA, colB, colC, colD = st.columns(4)
    with colA:
        incl_cut = st.number_input("incl.cut", 0.0, 1.0, float(config.necessity.incl_cut), 0.01)
    with colB:
        cov_cut = st.number_input("cov.cut", 0.0, 1.0, float(config.necessity.cov_cut), 0.01)
    with colC:
        ron_cut = st.number_input("ron.cut", 0.0, 1.0, float(config.necessity.ron_cut), 0.01)
    with colD:
        max_order = st.number_input("Max. literals", 1, len(config.conditions), min(config.necessity.max_order, len(config.conditions)))

    settings = replace(config.necessity, incl_cut=incl_cut, cov_cut=cov_cut, ron_cut=ron_cut, max_order=int(max_order))

    try:
        suin = necessary_disjunctions(calibrated, config.conditions, outcome, settings, neg_out=config.neg_out)
    except FsqcaError as e:
        st.error(str(e))
        return

    if suin.empty:
        st.info("No disjunction passes the cutoffs.")
    else:
        st.dataframe(suin.round(3), use_container_width=True)


if __name__ == "__main__":
    show()
