"""
UI Components Module
Modular, reusable UI components for the Order Status Dashboard
Easy to add, edit, and enhance without touching core logic
"""

import streamlit as st

# ===== UI LAYOUT HELPERS =====

def render_page_header(title, icon="🏭", subtitle=None):
    """Render consistent page headers"""
    st.title(f"{icon} {title}")
    if subtitle:
        st.caption(subtitle)
    st.divider()

def render_kpi_row(metrics_dict):
    """
    Render a row of KPI metrics

    Args:
        metrics_dict: Dict with format {"Label": {"value": "123", "delta": "+5%", "help": "Help text"}}
    """
    cols = st.columns(len(metrics_dict))
    for idx, (label, data) in enumerate(metrics_dict.items()):
        with cols[idx]:
            # Normalize empty / None metric values so the UI doesn't render blank cards
            raw_value = data.get("value", "N/A")
            if raw_value is None or (isinstance(raw_value, str) and str(raw_value).strip() == ""):
                display_value = "N/A"
            else:
                display_value = raw_value

            st.metric(
                label=label,
                value=display_value,
                delta=data.get("delta"),
                help=data.get("help")
            )

def render_data_table(df, title=None, max_rows=100, downloadable=True, download_filename="data.csv"):
    """
    Render a data table with optional download

    Args:
        df: Pandas DataFrame
        title: Optional section title
        max_rows: Maximum rows to display
        downloadable: Show download button
        download_filename: Name for downloaded file
    """
    if title:
        st.subheader(title)

    if df.empty:
        st.info("No data available")
        return

    st.dataframe(df.head(max_rows), width='stretch', hide_index=True)

    if len(df) > max_rows:
        st.caption(f"Showing first {max_rows} of {len(df)} records")

    if downloadable:
        csv = df.to_csv(index=False).encode('utf-8')
        st.download_button(
            label="📥 Download Full Data",
            data=csv,
            file_name=download_filename,
            mime="text/csv",
            key=f"download_{download_filename}"
        )

# ===== EMPTY STATE HANDLERS =====

def render_empty_state(message="No data available"):
    """Render empty state"""
    st.info(f"ℹ️ {message}")

# ===== UTILITY FORMATTERS =====

def format_number(value, format_type="integer"):
    """Format numbers consistently"""
    if value is None:
        return "N/A"

    formats = {
        'integer': '{:,}',
        'percentage': '{:.1f}%',
        'decimal': '{:.2f}'
    }

    try:
        return formats.get(format_type, '{}').format(value)
    except (TypeError, ValueError):
        return str(value)

def format_date(date_value, format_str='%Y-%m-%d'):
    """Format dates consistently"""
    if date_value is None:
        return "N/A"

    if isinstance(date_value, str):
        return date_value
    try:
        return date_value.strftime(format_str)
    except AttributeError:
        return str(date_value)

def format_order_reference(order, line):
    """Order and line as shown in the orders table, e.g. "100234-1"."""
    order = "" if order is None else str(order)
    line = "" if line is None else str(line)
    if order and line:
        return f"{order}-{line}"
    return order or line
