import time
from dataclasses import dataclass
from datetime import date

import pandas as pd

from business_rules import (
    find_part_number_column,
    get_assumed_year,
    get_expected_order_columns,
)
from errors import OrderPipelineError, PipelineRunError, RecordParseError
from file_loader import get_source_name, safe_read_orders
from order_aggregations import (
    delivery_timeline,
    orders_by_eta_date,
    status_distribution,
    summarize_orders,
    top_customers,
)
from order_processing import normalize_orders
from utils import resolve_today

# === Pipeline Result ===

@dataclass(frozen=True, eq=False)
class OrderPipelineResult:
    """
    Everything one pipeline run publishes. Built in full on every run;
    a new upload replaces it, nothing is merged.
    """
    records: pd.DataFrame
    orders_by_date: pd.DataFrame
    status_distribution: pd.DataFrame
    top_customers: pd.DataFrame
    today: date
    assumed_year: int

    @property
    def summary(self):
        return summarize_orders(self.records)

    @property
    def timeline(self):
        return delivery_timeline(self.orders_by_date)

# === Helper Functions ===

def check_columns(df, required_cols, filename, logs):
    """
    Helper function to check for missing columns.
    Missing columns are not fatal: the pipeline treats them as empty fields.

    Returns:
        list of missing column names
    """
    missing_cols = [col for col in required_cols if col not in df.columns]
    if missing_cols:
        logs.append(f"WARNING: '{filename}' is missing expected columns: {', '.join(missing_cols)}. They will be treated as empty.")
    return missing_cols

# === Order Records Loader ===

def load_order_records(orders_path, file_key='orders', delimiter=None):
    """
    Read the uploaded (or on-disk) order file into header-keyed string rows.

    Args:
        orders_path: file path, or a file-like object / bytes payload
        file_key: session state key for an uploaded file (default 'orders')
        delimiter: force ',' or '\\t' instead of detecting it

    Returns:
        tuple: (logs, orders_df)

    Raises:
        RecordParseError: if the file cannot be read into rows
    """
    logs = []
    start_time = time.time()
    logs.append("--- Order Records Loader ---")

    try:
        df = safe_read_orders(file_key, orders_path, delimiter=delimiter)
    except RecordParseError:
        raise
    except Exception as e:
        raise RecordParseError(f"Error reading file: {e}") from e

    logs.append(f"INFO: Loaded {len(df)} rows with {len(df.columns)} columns.")

    check_columns(df, get_expected_order_columns(), get_source_name(orders_path) or 'uploaded file', logs)

    if find_part_number_column(df.columns) is None:
        logs.append("WARNING: No part-number column found (expected ' Part' or 'Part').")

    end_time = time.time()
    logs.append(f"INFO: Order Records Loader finished in {end_time - start_time:.2f} seconds.")

    return logs, df

# === Pipeline Runner ===

def run_order_pipeline_from_frame(orders_df, today=None, assumed_year=None):
    """
    Normalize already-parsed order rows and build the three summary views.

    Args:
        orders_df: DataFrame of raw order rows
        today: reference date (defaults to the current date)
        assumed_year: year assumed for ETA tokens (defaults to business_rules)

    Returns:
        tuple: (logs, OrderPipelineResult)

    Raises:
        PipelineRunError: if normalization or aggregation fails; nothing partial is returned
    """
    logs = []
    start_time = time.time()
    logs.append("--- Order Status Pipeline ---")

    today = resolve_today(today)
    year = get_assumed_year(assumed_year)
    logs.append(f"INFO: Reference date {today.isoformat()}, ETA year assumed {year}.")

    try:
        records = normalize_orders(orders_df, today=today, assumed_year=year)
        result = OrderPipelineResult(
            records=records,
            orders_by_date=orders_by_eta_date(records),
            status_distribution=status_distribution(records),
            top_customers=top_customers(records),
            today=today,
            assumed_year=year,
        )
    except OrderPipelineError:
        raise
    except Exception as e:
        raise PipelineRunError(f"Error processing data: {e}") from e

    logs.append(f"INFO: Normalized {len(result.records)} order rows.")
    logs.append(f"INFO: {len(result.orders_by_date)} ETA date buckets, "
                f"{len(result.status_distribution)} status buckets, "
                f"{len(result.top_customers)} top customers.")

    end_time = time.time()
    logs.append(f"INFO: Order Status Pipeline finished in {end_time - start_time:.2f} seconds.")

    return logs, result


def run_order_pipeline(orders_path, today=None, assumed_year=None, file_key='orders', delimiter=None):
    """
    End-to-end run: parse -> normalize every row -> aggregate.

    Either returns a complete result or raises an OrderPipelineError with a
    single human-readable message.

    Returns:
        tuple: (logs, OrderPipelineResult)
    """
    load_logs, orders_df = load_order_records(orders_path, file_key=file_key, delimiter=delimiter)
    run_logs, result = run_order_pipeline_from_frame(orders_df, today=today, assumed_year=assumed_year)
    return load_logs + run_logs, result
