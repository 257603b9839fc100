# app.py
"""
Main app router for the PSD fsQCA platform.

Run with:  streamlit run app.py
"""

import importlib

import streamlit as st
from streamlit_option_menu import option_menu

# Page config
st.set_page_config(
    page_title="PSD fsQCA",
    layout="wide",
    initial_sidebar_state="expanded",
)

PAGES = {
    "Start": "views.start",
    "Calibration": "views.calibration",
    "Necessity": "views.necessity",
    "Truth Table": "views.truth_table",
    "QCA Solutions": "views.qca_results",
    "Reports": "views.report_generator",
    "About": "views.about",
}

ICONS = ["house", "sliders", "check2-square", "table", "gear", "file-text", "info-circle"]


def safe_import(module_name):
    """Import a page module, reporting failures in the sidebar."""
    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        st.sidebar.error(f"Module {module_name} not found: {e}")
        return None


def draw_header():
    st.markdown("""
    <div style="background-color:#283044;padding:20px;border-radius:10px;margin-bottom:20px">
        <h1 style="color:white;margin:0">Public Service Delivery · fsQCA</h1>
        <p style="color:#cccccc;margin:5px 0 0 0">
            Calibration, necessity analysis, truth table and Boolean minimization
        </p>
    </div>
    """, unsafe_allow_html=True)


def init_session_state():
    defaults = {
        "raw_df": None,
        "config": None,
        "calibration": None,
        "truth_table": None,
        "solutions": None,
        "analysis": None,
    }
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v


with st.sidebar:
    selected = option_menu(
        menu_title="Navigation",
        options=list(PAGES),
        icons=ICONS,
        default_index=0,
        styles={
            "container": {"padding": "5px"},
            "nav-link": {"font-size": "14px", "margin": "2px"},
            "nav-link-selected": {"background-color": "#283044"},
        }
    )

init_session_state()
draw_header()

module = safe_import(PAGES[selected])
if module:
    module.show()
else:
    st.error(f"Module '{selected}' not available")
