"""
Order Status Page
Single view over one pipeline run:
- Summary cards (total, due today, at risk, customers)
- Orders by ETA date, delivery timeline, status distribution, top customers
- Order details with shipment countdown
- Excel export
"""

import streamlit as st
import pandas as pd
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from ui_components import render_page_header, render_kpi_row, render_data_table, render_empty_state, format_number, format_date, format_order_reference
from business_rules import (
    CUSTOMER_NAME_COLUMN,
    DATA_FIELD_DEFINITIONS,
    DAYS_UNTIL_SHIPMENT_FIELD,
    ETA_DATE_FIELD,
    SHIP_BY_COLUMN,
    STATUS_CATEGORY_FIELD,
    STATUS_NOTE_FIELD,
    find_part_number_column,
)
from order_processing import shipment_countdown_label
from utils import get_pipeline_result_as_excel

ORDER_DETAIL_COLUMNS = [
    "Status", "ETA Date", "Shipment", "Customer", "Order #",
    "Part #", "Description", "Ship By", "Notes"
]

# ===== TABLE BUILDERS =====

def build_order_details_table(records_df):
    """
    Shape normalized records into the order details table.

    Args:
        records_df: records from OrderPipelineResult

    Returns:
        DataFrame with ORDER_DETAIL_COLUMNS, one row per order in input order
    """
    if records_df.empty:
        return pd.DataFrame(columns=ORDER_DETAIL_COLUMNS)

    fields = DATA_FIELD_DEFINITIONS["orders"]

    def column_or_blank(name):
        if name is not None and name in records_df.columns:
            return records_df[name].fillna("").astype(str)
        return pd.Series("", index=records_df.index)

    order_refs = [
        format_order_reference(order, line)
        for order, line in zip(column_or_blank(fields["order_number"]["column"]),
                               column_or_blank(fields["order_line"]["column"]))
    ]

    shipment_labels = pd.Series(
        [shipment_countdown_label(days) for days in records_df[DAYS_UNTIL_SHIPMENT_FIELD]],
        dtype=object,
    )

    return pd.DataFrame({
        "Status": records_df[STATUS_CATEGORY_FIELD].values,
        "ETA Date": records_df[ETA_DATE_FIELD].values,
        "Shipment": shipment_labels,
        "Customer": column_or_blank(CUSTOMER_NAME_COLUMN).values,
        "Order #": order_refs,
        "Part #": column_or_blank(find_part_number_column(records_df.columns)).values,
        "Description": column_or_blank(fields["description"]["column"]).values,
        "Ship By": column_or_blank(SHIP_BY_COLUMN).values,
        "Notes": records_df[STATUS_NOTE_FIELD].values,
    }, columns=ORDER_DETAIL_COLUMNS)

# ===== PAGE =====

def render_order_status_page(result):
    """
    Render the order status dashboard for one pipeline result.

    Args:
        result: OrderPipelineResult, or None when nothing has been loaded yet
    """
    render_page_header(
        "Manufacturing Orders Dashboard",
        subtitle="Order status and ETA derived from recovery notes"
    )

    if result is None:
        render_empty_state("Upload a CSV or TSV file with order data to get started.")
        return

    if result.records.empty:
        render_empty_state("The uploaded file has no order rows.")
        return

    summary = result.summary
    render_kpi_row({
        "Total Orders": {"value": format_number(summary.total_orders)},
        "Orders Due Today": {"value": format_number(summary.due_today),
                             "help": "Ship-by date is today"},
        "At Risk Orders": {"value": format_number(summary.at_risk),
                           "help": "At Risk, On Hold or Late"},
        "Customers": {"value": format_number(summary.unique_customers)},
    })
    st.caption(f"Reference date {format_date(result.today)} · ETA year assumed {result.assumed_year}")

    col1, col2 = st.columns(2)
    with col1:
        render_data_table(result.orders_by_date, title="Orders by ETA Date",
                          downloadable=False)
    with col2:
        render_data_table(result.status_distribution, title="Status Distribution",
                          downloadable=False)

    col3, col4 = st.columns(2)
    with col3:
        render_data_table(result.timeline, title="Delivery Timeline",
                          downloadable=False)
    with col4:
        render_data_table(result.top_customers, title="Top Customers",
                          downloadable=False)

    st.divider()
    render_data_table(
        build_order_details_table(result.records),
        title="Order Details",
        max_rows=len(result.records),
        download_filename="order_status.csv"
    )

    st.download_button(
        label="📥 Download Excel Report",
        data=get_pipeline_result_as_excel(result),
        file_name="order_status.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key="download_order_status_excel"
    )
