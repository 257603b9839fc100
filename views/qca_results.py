"""
QCA Results UI: C/I/P Solutions (Complex, Intermediate, Parsimonious)
"""

import json
from dataclasses import replace

import pandas as pd
import streamlit as st

from fsqca.minimization import minimize_truth_table

# ============================================================
# Helper functions
# ============================================================

def metric_card(title, value, subtitle=None):
    """Display a metric card with consistent formatting."""
    st.metric(
        label=f"**{title}**",
        value=f"{value:.3f}" if value is not None and value == value else "—",
        help=subtitle
    )


def show_solution_block(label, solution):
    """Display a solution block with metrics and terms."""
    st.markdown(f"## {label} Solution")

    st.markdown("#### Boolean Expression")
    st.code(f"{solution.expression or '(no terms)'}  ->  {solution.outcome}", language="text")

    colA, colB, colC = st.columns(3)
    with colA:
        metric_card("Consistency", solution.consistency, "Degree to which solution is sufficient")
    with colB:
        metric_card("Coverage", solution.coverage, "Degree to which solution explains outcome")
    with colC:
        metric_card("PRI", solution.pri, "Reduction of inconsistencies")

    if solution.terms:
        df_terms = pd.DataFrame([
            {
                "Term": t.expression,
                "inclS": t.consistency,
                "PRI": t.pri,
                "covS": t.raw_coverage,
                "covU": t.unique_coverage,
                "Cases": ", ".join(str(c) for c in t.cases),
                "Below cov. cutoff": t.below_coverage_cut,
            }
            for t in solution.terms
        ])
        st.dataframe(df_terms.round(3), use_container_width=True)
    else:
        st.info("No prime implicants found for this solution.")

    st.markdown("---")


# ============================================================
# Main UI
# ============================================================

def show():
    st.title("QCA: Minimization Results")

    config = st.session_state.get("config")
    truth_table = st.session_state.get("truth_table")
    if config is None or truth_table is None:
        st.error("Generate the Truth Table first in the 'Truth Table' module.")
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Positive rows", len(truth_table.positive()))
    with col2:
        st.metric("Remainders", len(truth_table.remainders()))
    with col3:
        st.metric("Cases", truth_table.n_cases)

    # ============================================================
    # Directional Expectations (Optional)
    # ============================================================
    st.markdown("#### Directional Expectations")

    with st.expander("Set theoretical assumptions for Intermediate Solution"):
        options = {
            "Not specified": None,
            "Presence contributes to outcome (+)": 1,
            "Absence contributes to outcome (-)": 0,
        }
        labels = list(options)
        de = {}
        for cond in truth_table.conditions:
            current = config.directional_expectations.get(cond)
            index = labels.index(next(k for k, v in options.items() if v == current))
            choice = st.selectbox(f"{cond}:", options=labels, index=index, key=f"de_{cond}")
            de[cond] = options[choice]

    # ============================================================
    # Generate Solutions
    # ============================================================
    st.markdown("---")

    col_run, col_info = st.columns([1, 3])
    with col_run:
        btn_run = st.button("Run Minimization", type="primary", use_container_width=True)
    with col_info:
        st.caption("Complex (C): All logical remainders excluded")
        st.caption("Intermediate (I): Remainders in line with directional expectations")
        st.caption("Parsimonious (P): All logical remainders included")

    if btn_run:
        st.session_state["config"] = replace(config, directional_expectations=de)
        with st.spinner("Minimizing..."):
            st.session_state["solutions"] = minimize_truth_table(
                truth_table,
                coverage_cut=config.coverage_cut,
                directional_expectations=de,
            )

    solutions = st.session_state.get("solutions")
    if not solutions:
        st.info("Click the button above to generate QCA solutions.")
        return

    show_solution_block("Complex (C)", solutions["complex"])
    show_solution_block("Intermediate (I)", solutions["intermediate"])
    show_solution_block("Parsimonious (P)", solutions["parsimonious"])

    json_str = json.dumps({k: s.to_dict() for k, s in solutions.items()}, indent=2, default=str)
    st.download_button("Download JSON", json_str, "qca_solutions.json", "application/json")


if __name__ == "__main__":
    show()
