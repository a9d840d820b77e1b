import io # Required for Excel export
from datetime import date, datetime

import pandas as pd

# --- Constants ---
EXPORT_SHEET_NAMES = {
    'records': 'Orders',
    'orders_by_date': 'Orders by ETA Date',
    'status_distribution': 'Status Distribution',
    'top_customers': 'Top Customers',
}

# --- Scalar Helpers ---

def is_blank(value):
    """
    True for values the pipeline treats as "field not supplied":
    None, NaN/NA/NaT, or the empty string. Whitespace is NOT blank.
    """
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return isinstance(value, str) and value == ""


def resolve_today(today=None):
    """
    Normalize a "today" reference to a calendar date (no time of day).

    Args:
        today: None (use the current date), date, datetime, pd.Timestamp or ISO string

    Returns:
        datetime.date
    """
    if today is None:
        return date.today()
    # pd.Timestamp is a datetime subclass
    if isinstance(today, datetime):
        return today.date()
    if isinstance(today, date):
        return today
    return pd.Timestamp(today).date()

# --- Data Export Function ---

def get_filtered_data_as_excel(dfs_to_export_dict, logs=None):
    """
    Processes a dictionary of dataframes
    and returns an Excel file as a bytes object for download.
    The dictionary format is { "sheet_name": (dataframe, include_index_bool) }

    Empty or non-DataFrame entries are skipped (noted in `logs` if given).
    """
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        for sheet_name, (df, include_index) in dfs_to_export_dict.items():

            if not isinstance(df, pd.DataFrame):
                if logs is not None:
                    logs.append(f"INFO: Skipping sheet '{sheet_name}': not a DataFrame.")
                continue
            if df.empty:
                if logs is not None:
                    logs.append(f"INFO: Skipping sheet '{sheet_name}': DataFrame is empty.")
                continue

            df.to_excel(writer, sheet_name=sheet_name, index=include_index)

            # Auto-adjust column widths
            worksheet = writer.sheets[sheet_name]
            offset = 1 if include_index else 0
            for idx, col in enumerate(df.columns):
                series = df[col]
                max_len = max(
                    series.map(lambda value: len(str(value))).max(),  # Data max len
                    len(str(col))  # Header len
                ) + 2  # Add a little extra space
                worksheet.set_column(idx + offset, idx + offset, max_len)

    return output.getvalue()


def get_pipeline_result_as_excel(result, logs=None):
    """
    Export a pipeline result (normalized orders + the three summaries) to an Excel workbook.

    Args:
        result: OrderPipelineResult from data_loader.run_order_pipeline
        logs: optional list collecting skip messages

    Returns:
        bytes: .xlsx content
    """
    return get_filtered_data_as_excel({
        EXPORT_SHEET_NAMES['records']: (result.records, False),
        EXPORT_SHEET_NAMES['orders_by_date']: (result.orders_by_date, False),
        EXPORT_SHEET_NAMES['status_distribution']: (result.status_distribution, False),
        EXPORT_SHEET_NAMES['top_customers']: (result.top_customers, False),
    }, logs=logs)
