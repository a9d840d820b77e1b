"""
Pytest configuration and shared fixtures for all tests
Centralized mock order files and utilities
"""

import pytest
import pandas as pd
import io
import os
import sys
from datetime import date

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# ===== SHARED MOCK DATA FIXTURES =====

# Reference "today" used across the mock scenarios
REFERENCE_TODAY = date(2025, 6, 1)

ORDERS_HEADER = ["Order", "Line", " Part", "Desc", "OrderQty", "Name", "ShipBy", "Recovery Date"]

ORDERS_ROWS = [
    # ETA + PENDING remark
    ["1001", "1", "PN-1", "Bracket", "10", "Globex", "06/10/25", "ETA 6/14\nPENDING"],
    # Single-line ETA in the past, due today
    ["1002", "1", "PN-2", "Plate", "5", "Acme", "06/01/25", "ETA 3/01"],
    # Empty recovery note and ship-by
    ["1003", "2", "PN-3", "Bolt", "100", "Globex", "", ""],
    # Date slide remark, ship-by overdue
    ["1004", "1", "PN-4", "Nut", "50", "Initech", "05/20/25", "ETA 7/04\nPOSSIBLE DATE SLIDE"],
    # Credit hold, malformed ship-by
    ["1005", "3", "PN-5", "Washer", "20", "Acme", "bad", "ETA 6/20\nCREDIT HOLD"],
    # Remark without keyword, ETA in the past
    ["1006", "1", "PN-6", "Gear", "2", "Globex", "06/03/25", "ETA 5/15\nWaiting on vendor"],
]


def _quote(value):
    if any(ch in value for ch in (',', '\t', '\n', '"')):
        return '"' + value.replace('"', '""') + '"'
    return value


def build_delimited_text(header, rows, sep):
    """Render header + rows as CSV/TSV text with quoted multi-line fields and blank lines."""
    lines = [sep.join(_quote(col) for col in header)]
    for idx, row in enumerate(rows):
        lines.append(sep.join(_quote(value) for value in row))
        if idx == 1:
            lines.append("")  # blank line to be skipped
    return "\n".join(lines) + "\n\n"


@pytest.fixture
def reference_today():
    """The fixed 'today' for the mock order scenarios"""
    return REFERENCE_TODAY


@pytest.fixture
def mock_orders_csv():
    """
    Creates mock orders CSV with various scenarios:
    - Multi-line quoted recovery notes
    - Single-line ETA note
    - Empty recovery note / ship-by
    - Malformed ship-by
    - A blank line between rows
    """
    return "orders.csv", build_delimited_text(ORDERS_HEADER, ORDERS_ROWS, ",")


@pytest.fixture
def mock_orders_tsv():
    """Same orders as mock_orders_csv, tab-separated"""
    return "orders.tsv", build_delimited_text(ORDERS_HEADER, ORDERS_ROWS, "\t")


@pytest.fixture
def orders_csv_path(tmp_path, mock_orders_csv):
    """Writes the mock orders CSV to disk and returns its path"""
    path = tmp_path / mock_orders_csv[0]
    path.write_text(mock_orders_csv[1], encoding="utf-8")
    return str(path)


@pytest.fixture
def raw_orders_df():
    """Mock orders as a parsed DataFrame of strings"""
    return pd.DataFrame(ORDERS_ROWS, columns=ORDERS_HEADER)


@pytest.fixture
def uploaded_orders_buffer(mock_orders_csv):
    """Mock orders as an uploaded-file style buffer"""
    buffer = io.BytesIO(mock_orders_csv[1].encode("utf-8"))
    buffer.name = mock_orders_csv[0]
    return buffer


@pytest.fixture
def empty_dataframe():
    """Returns an empty DataFrame"""
    return pd.DataFrame()

# ===== UTILITY FUNCTIONS FOR TESTS =====

def assert_log_contains(logs, expected_message):
    """
    Helper to assert that a log message contains expected text

    Args:
        logs: List of log messages
        expected_message: Text expected to be in one of the logs
    """
    log_text = " ".join(logs)
    assert expected_message in log_text, f"Expected '{expected_message}' not found in logs: {log_text}"

def assert_columns_exist(df, columns):
    """
    Helper to assert that DataFrame contains required columns

    Args:
        df: Pandas DataFrame
        columns: List of column names that should exist
    """
    missing = set(columns) - set(df.columns)
    assert not missing, f"Missing required columns: {missing}"
