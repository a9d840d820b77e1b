"""
Order Processing
Per-row transforms for manufacturing orders:
- ship-by countdown (days until / overdue)
- record normalization (recovery note + countdown merged onto the raw row)

Every function here works on one row at a time and never mutates its input.
"""

from datetime import date

import pandas as pd

from business_rules import (
    DAYS_UNTIL_SHIPMENT_FIELD,
    DERIVED_FIELDS,
    RECOVERY_NOTE_COLUMN,
    SHIP_BY_COLUMN,
    SHIPMENT_RULES,
)
from recovery_notes import parse_recovery_note
from utils import is_blank, resolve_today


# ===== SHIPMENT TIMER =====

def parse_ship_by_date(ship_by):
    """
    Parse a MM/DD/YY ship-by value with a fixed "20" century.

    Returns:
        datetime.date, or None if the value is empty or malformed
    """
    if is_blank(ship_by):
        return None

    parts = str(ship_by).split(SHIPMENT_RULES["ship_by_separator"])
    if len(parts) != SHIPMENT_RULES["ship_by_parts"]:
        return None

    month, day, year = (part.strip() for part in parts)
    if not all(part.isascii() and part.isdigit() for part in (month, day, year)):
        return None
    if len(year) != SHIPMENT_RULES["year_digits"]:
        return None
    try:
        return date(int(SHIPMENT_RULES["century_prefix"] + year), int(month), int(day))
    except ValueError:
        return None


def days_until_shipment(ship_by, today=None):
    """
    Days from today until the ship-by date.

    0 means due today, positive means days left, negative means days overdue.
    Empty or malformed values return None.
    """
    ship_by_date = parse_ship_by_date(ship_by)
    if ship_by_date is None:
        return None
    return (ship_by_date - resolve_today(today)).days


def shipment_countdown_label(days):
    """Human-readable countdown for the orders table."""
    if days is None or pd.isna(days):
        return None
    days = int(days)
    if days == 0:
        return "Due today"
    if days > 0:
        return f"{days} days left"
    return f"{abs(days)} days overdue"


# ===== RECORD NORMALIZER =====

def normalize_record(row, today=None, assumed_year=None):
    """
    Derive etaDate, statusNote, statusCategory and daysUntilShipment for one order row.

    Args:
        row: mapping of column name -> raw string (dict or pd.Series)
        today: reference date for Late/On Time and the countdown
        assumed_year: year assumed for ETA tokens

    Returns:
        dict: a new record with every input field plus the derived fields
    """
    record = dict(row)
    today = resolve_today(today)

    record.update(parse_recovery_note(record.get(RECOVERY_NOTE_COLUMN), today, assumed_year))
    record[DAYS_UNTIL_SHIPMENT_FIELD] = days_until_shipment(record.get(SHIP_BY_COLUMN), today)
    return record


def normalize_orders(orders_df, today=None, assumed_year=None):
    """
    Normalize every row of an orders DataFrame.

    Input order and columns are preserved; the derived fields are appended
    (or replaced if the frame was already normalized). The input frame is not modified.

    Args:
        orders_df: DataFrame of raw order rows (string columns)
        today: reference date shared by every row
        assumed_year: year assumed for ETA tokens

    Returns:
        pd.DataFrame of normalized records
    """
    today = resolve_today(today)
    source_columns = [col for col in orders_df.columns if col not in DERIVED_FIELDS]

    records = [
        normalize_record(row, today, assumed_year)
        for row in orders_df.to_dict(orient='records')
    ]

    normalized = pd.DataFrame.from_records(records, columns=source_columns + DERIVED_FIELDS)
    normalized.index = orders_df.index
    normalized[DAYS_UNTIL_SHIPMENT_FIELD] = normalized[DAYS_UNTIL_SHIPMENT_FIELD].astype('Int64')
    return normalized
