"""
Order Aggregations
Summary views over normalized order records:
- orders by ETA date (TBD last)
- status distribution
- top customers by order count
- headline metrics (total / due today / at risk / customers)

Each function is a pure reduction that rebuilds its output from the full record set.
"""

from dataclasses import dataclass

import pandas as pd

from business_rules import (
    AGGREGATION_RULES,
    CUSTOMER_NAME_COLUMN,
    DAYS_UNTIL_SHIPMENT_FIELD,
    ETA_DATE_FIELD,
    RECOVERY_NOTE_RULES,
    STATUS_CATEGORY_FIELD,
    is_at_risk_category,
)

DATE_BUCKET_COLUMNS = ['date', 'count']
STATUS_BUCKET_COLUMNS = ['status', 'count']
CUSTOMER_BUCKET_COLUMNS = ['name', 'count']


@dataclass(frozen=True)
class OrderSummary:
    """Headline numbers for the summary cards."""
    total_orders: int
    due_today: int
    at_risk: int
    unique_customers: int


def _count_by(records_df, column, label):
    """
    Count rows per distinct value of `column`, in first-seen order.

    A missing column groups every row under the empty string.
    """
    if records_df.empty:
        return pd.DataFrame(columns=[label, 'count']).astype({'count': 'int64'})

    if column in records_df.columns:
        keys = records_df[column].fillna('').astype(str)
    else:
        keys = pd.Series('', index=records_df.index)

    counts = keys.groupby(keys, sort=False).size()
    return pd.DataFrame({label: counts.index.astype(str), 'count': counts.values.astype('int64')})


def eta_sort_key(eta_date):
    """
    Sort key for an ETA bucket: month * 100 + day.

    Unparseable labels sort after every real date (TBD placement is handled separately).
    """
    parts = str(eta_date).split('/')
    try:
        return int(parts[0]) * AGGREGATION_RULES["eta_sort_month_weight"] + int(parts[1])
    except (IndexError, ValueError):
        return float('inf')


def orders_by_eta_date(records_df):
    """
    Count orders per ETA date.

    Sorted ascending by month/day; the TBD bucket always comes last.
    Buckets with the same month/day keep their first-seen order.

    Returns:
        pd.DataFrame with columns: date, count
    """
    buckets = _count_by(records_df, ETA_DATE_FIELD, 'date')
    if buckets.empty:
        return buckets

    sentinel = RECOVERY_NOTE_RULES["eta_sentinel"]
    is_tbd = buckets['date'] == sentinel

    dated = buckets[~is_tbd].copy()
    dated['_sort_key'] = dated['date'].map(eta_sort_key)
    dated = dated.sort_values('_sort_key', kind='stable').drop(columns='_sort_key')

    return pd.concat([dated, buckets[is_tbd]], ignore_index=True)


def status_distribution(records_df):
    """
    Count orders per status category, in first-seen order.

    Returns:
        pd.DataFrame with columns: status, count
    """
    return _count_by(records_df, STATUS_CATEGORY_FIELD, 'status')


def top_customers(records_df, limit=None):
    """
    Rank customers by number of orders.

    Sorted descending by count; ties keep first-seen order.

    Args:
        records_df: normalized order records
        limit: number of customers to keep (default business_rules top_customers_limit)

    Returns:
        pd.DataFrame with columns: name, count
    """
    if limit is None:
        limit = AGGREGATION_RULES["top_customers_limit"]

    buckets = _count_by(records_df, CUSTOMER_NAME_COLUMN, 'name')
    ranked = buckets.sort_values('count', ascending=False, kind='stable')
    return ranked.head(limit).reset_index(drop=True)


def delivery_timeline(orders_by_date_df):
    """Date buckets with the TBD bucket removed, for the delivery timeline."""
    if orders_by_date_df.empty:
        return orders_by_date_df
    sentinel = RECOVERY_NOTE_RULES["eta_sentinel"]
    return orders_by_date_df[orders_by_date_df['date'] != sentinel].reset_index(drop=True)


def summarize_orders(records_df):
    """
    Headline metrics for the dashboard cards.

    - total_orders: number of records
    - due_today: records whose ship-by date is today
    - at_risk: records in At Risk, On Hold or Late
    - unique_customers: distinct customer names (a missing column counts as one blank name)
    """
    if records_df.empty:
        return OrderSummary(total_orders=0, due_today=0, at_risk=0, unique_customers=0)

    due_today = 0
    if DAYS_UNTIL_SHIPMENT_FIELD in records_df.columns:
        days = pd.to_numeric(records_df[DAYS_UNTIL_SHIPMENT_FIELD], errors='coerce')
        due_today = int((days == 0).sum())

    at_risk = 0
    if STATUS_CATEGORY_FIELD in records_df.columns:
        at_risk = sum(1 for category in records_df[STATUS_CATEGORY_FIELD] if is_at_risk_category(category))

    unique_customers = 1
    if CUSTOMER_NAME_COLUMN in records_df.columns:
        unique_customers = records_df[CUSTOMER_NAME_COLUMN].fillna('').astype(str).nunique()

    return OrderSummary(
        total_orders=len(records_df),
        due_today=due_today,
        at_risk=at_risk,
        unique_customers=int(unique_customers),
    )
