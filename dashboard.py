import streamlit as st
import os
from datetime import datetime
import time

from business_rules import RECOVERY_NOTE_RULES, get_assumed_year
from data_loader import run_order_pipeline
from errors import OrderPipelineError
from views.order_status_page import render_order_status_page

# --- Page Configuration ---
st.set_page_config(
    page_title="Manufacturing Orders Dashboard",
    page_icon="🏭",
    layout="wide"
)

# --- File Paths & Settings ---
# Set env vars to override defaults: e.g., export ORDERS_FILE_PATH="/path/to/orders.csv"
ORDERS_FILE_PATH = os.environ.get("ORDERS_FILE_PATH", "data/ORDERS.csv")
DEFAULT_ASSUMED_YEAR = get_assumed_year(os.environ.get("ETA_ASSUMED_YEAR"))

# --- Session State ---
if 'uploaded_files' not in st.session_state:
    st.session_state.uploaded_files = {}
if 'pipeline_result' not in st.session_state:
    st.session_state.pipeline_result = None
if 'debug_logs' not in st.session_state:
    st.session_state.debug_logs = []
if 'pipeline_error' not in st.session_state:
    st.session_state.pipeline_error = None

# === FILE UPLOAD ===
with st.sidebar.expander("File Status & Upload", expanded=True):
    uploaded_orders = st.file_uploader(
        "Upload order file",
        type=["csv", "tsv", "txt"],
        key="orders_upload",
        help="CSV or TSV file with order data"
    )

    if uploaded_orders is not None:
        st.session_state.uploaded_files['orders'] = uploaded_orders
        st.success(f"✓ Using uploaded file: {uploaded_orders.name}")
    else:
        st.session_state.uploaded_files.pop('orders', None)
        if os.path.isfile(os.path.abspath(ORDERS_FILE_PATH)):
            st.success("✓ Found orders file")
        else:
            st.warning("✗ No orders file yet")
            st.caption(f"Upload a file or place one at: {os.path.abspath(ORDERS_FILE_PATH)}")

# === SETTINGS ===
with st.sidebar.expander("Settings", expanded=False):
    assumed_year = st.number_input(
        "ETA year",
        min_value=RECOVERY_NOTE_RULES["min_assumed_year"],
        max_value=RECOVERY_NOTE_RULES["max_assumed_year"],
        value=DEFAULT_ASSUMED_YEAR,
        step=1,
        help="Recovery notes only give month/day; this year is assumed for every ETA"
    )
    reference_date = st.date_input(
        "Reference date",
        value=datetime.now().date(),
        help="'Today' used for Late / On Time and the ship-by countdown"
    )

# === Pipeline Run ===
def load_order_status():
    """
    Runs the order status pipeline and publishes the result into st.session_state.
    On failure the previous result stays published and the error is shown.
    """
    with st.spinner("Processing order data..."):
        try:
            logs, result = run_order_pipeline(
                ORDERS_FILE_PATH,
                today=reference_date,
                assumed_year=assumed_year,
                file_key='orders'
            )
        except OrderPipelineError as e:
            st.session_state.pipeline_error = str(e)
            st.session_state.debug_logs = [f"ERROR: {e}"]
            return

    st.session_state.pipeline_result = result
    st.session_state.pipeline_error = None
    st.session_state.debug_logs = logs
    st.session_state.last_load_time = time.time()


def get_run_key():
    """Identifies the inputs of a run; a new key triggers a fresh run."""
    if uploaded_orders is not None:
        source_id = getattr(uploaded_orders, 'file_id', None) or (uploaded_orders.name, uploaded_orders.size)
    elif os.path.isfile(os.path.abspath(ORDERS_FILE_PATH)):
        source_id = (ORDERS_FILE_PATH, os.path.getmtime(ORDERS_FILE_PATH))
    else:
        source_id = None
    return (source_id, reference_date, int(assumed_year))


if st.sidebar.button("Reload Data"):
    st.session_state.last_run_key = None

run_key = get_run_key()
if run_key[0] is not None and st.session_state.get('last_run_key') != run_key:
    st.session_state.last_run_key = run_key
    load_order_status()

# === Main App UI ===
if st.session_state.pipeline_error:
    st.error(st.session_state.pipeline_error)

render_order_status_page(st.session_state.pipeline_result)

with st.expander("Debug Logs"):
    debug_logs = st.session_state.get('debug_logs', [])
    if not debug_logs:
        st.caption("No pipeline run yet.")
    for msg in debug_logs:
        if msg.startswith("ERROR"):
            st.error(msg)
        elif msg.startswith("WARNING"):
            st.warning(msg)
        else:
            st.info(msg)
