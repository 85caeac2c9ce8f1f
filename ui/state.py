from __future__ import annotations

import streamlit as st

from core.config import CFG
from core.errors import DataFetchError, DatasetValidationError
from domain.reference import DEFAULT_REFERENCE
from use_cases.run_pipeline import RunPipelineInput, run_pipeline_uc


def load_report_data() -> None:
    """Run fetch -> reshape -> enrich -> derive and keep the result for this session."""
    try:
        with st.spinner("Downloading and processing data..."):
            out = run_pipeline_uc(CFG, RunPipelineInput(reference=DEFAULT_REFERENCE))
    except DataFetchError as e:
        st.error(f"Could not load the data source: {e}")
        st.stop()
    except DatasetValidationError as e:
        if e.missing_fields:
            st.error("Unexpected data format.")
            st.markdown("**Missing fields:**")
            st.code(", ".join(e.missing_fields))
        else:
            st.error(f"Unexpected data format: {e}")
        st.stop()

    st.session_state["frame"] = out.frame
    st.session_state["meta"] = out.meta


def ensure_state() -> None:
    if "frame" not in st.session_state or st.session_state["frame"] is None:
        load_report_data()
