"""
Business Rules Configuration
Centralized definitions for fields, status keywords, and order-status logic.
This file allows rules to be changed in one place without modifying tool code.
"""

from dataclasses import dataclass


# ===== STATUS CATEGORIES =====

STATUS_PENDING = "Pending"
STATUS_COMPLETE = "Complete"
STATUS_AT_RISK = "At Risk"
STATUS_ON_HOLD = "On Hold"
STATUS_LATE = "Late"
STATUS_ON_TIME = "On Time"
STATUS_UNKNOWN = "Unknown"

STATUS_CATEGORIES = (
    STATUS_PENDING,
    STATUS_COMPLETE,
    STATUS_AT_RISK,
    STATUS_ON_HOLD,
    STATUS_LATE,
    STATUS_ON_TIME,
    STATUS_UNKNOWN,
)


@dataclass(frozen=True)
class StatusRule:
    """One keyword rule: if `keyword` appears in the status note, assign `category`."""
    keyword: str
    category: str


# ===== ORDER STATUS RULES =====

ORDER_STATUS_RULES = {
    "keyword_rules": [
        # Evaluated top to bottom, first match wins
        StatusRule("PENDING", STATUS_PENDING),
        StatusRule("COMPLETE", STATUS_COMPLETE),
        StatusRule("POSSIBLE DATE SLIDE", STATUS_AT_RISK),
        StatusRule("CREDIT HOLD", STATUS_ON_HOLD),
    ],

    # Category when no keyword matched and no ETA could be read
    "no_eta_category": STATUS_PENDING,

    # Category when the recovery note is empty (no rule runs at all)
    "empty_note_category": STATUS_UNKNOWN,

    # ETA compared to today (calendar date, no time of day)
    "eta_before_today_category": STATUS_LATE,
    "eta_on_or_after_today_category": STATUS_ON_TIME,

    # Categories counted in the "At Risk Orders" summary card
    "at_risk_categories": [STATUS_AT_RISK, STATUS_ON_HOLD, STATUS_LATE],
}


# ===== RECOVERY NOTE RULES =====

RECOVERY_NOTE_RULES = {
    # Sentinel used when no ETA token is found
    "eta_sentinel": "TBD",

    # Case-sensitive: "ETA" + whitespace + month/day
    "eta_pattern": r"ETA\s+([0-9]+/[0-9]+)",

    # Note lines starting with this prefix are ETA lines, not status text
    "eta_line_prefix": "ETA",

    # Recovery notes only carry month/day; the year is assumed.
    # Override with ETA_ASSUMED_YEAR or the sidebar setting.
    "assumed_year": 2025,
    "min_assumed_year": 2000,
    "max_assumed_year": 2099,
}


# ===== SHIPMENT RULES =====

SHIPMENT_RULES = {
    # ShipBy is MM/DD/YY; the century is fixed
    "ship_by_separator": "/",
    "ship_by_parts": 3,
    "year_digits": 2,
    "century_prefix": "20",
}


# ===== AGGREGATION RULES =====

AGGREGATION_RULES = {
    "top_customers_limit": 5,
    # ETA buckets are sorted by month * 100 + day
    "eta_sort_month_weight": 100,
}


# ===== DATA FIELD DEFINITIONS =====

DATA_FIELD_DEFINITIONS = {
    "orders": {
        "recovery_note": {
            "column": "Recovery Date",
            "description": "Free-text recovery note with an ETA line and status remarks",
            "example": "ETA 6/14\nPENDING",
        },
        "ship_by": {
            "column": "ShipBy",
            "description": "Ship-by deadline (MM/DD/YY)",
            "example": "06/10/25",
        },
        "customer_name": {
            "column": "Name",
            "description": "Customer name",
            "example": "Acme",
        },
        "order_number": {
            "column": "Order",
            "description": "Sales order number",
            "example": "100234",
        },
        "order_line": {
            "column": "Line",
            "description": "Order line number",
            "example": "1",
        },
        "part_number": {
            "column": " Part",
            "alternate_columns": ["Part"],
            "description": "Part number (exports carry a leading space in the header)",
            "example": "PN-4410",
        },
        "description": {
            "column": "Desc",
            "description": "Part description",
            "example": "Bracket, steel",
        },
        "order_qty": {
            "column": "OrderQty",
            "description": "Ordered quantity",
            "example": "25",
        },
    },

    "derived": {
        "eta_date": "etaDate",
        "status_note": "statusNote",
        "status_category": "statusCategory",
        "days_until_shipment": "daysUntilShipment",
    },
}

RECOVERY_NOTE_COLUMN = DATA_FIELD_DEFINITIONS["orders"]["recovery_note"]["column"]
SHIP_BY_COLUMN = DATA_FIELD_DEFINITIONS["orders"]["ship_by"]["column"]
CUSTOMER_NAME_COLUMN = DATA_FIELD_DEFINITIONS["orders"]["customer_name"]["column"]

ETA_DATE_FIELD = DATA_FIELD_DEFINITIONS["derived"]["eta_date"]
STATUS_NOTE_FIELD = DATA_FIELD_DEFINITIONS["derived"]["status_note"]
STATUS_CATEGORY_FIELD = DATA_FIELD_DEFINITIONS["derived"]["status_category"]
DAYS_UNTIL_SHIPMENT_FIELD = DATA_FIELD_DEFINITIONS["derived"]["days_until_shipment"]

DERIVED_FIELDS = [
    ETA_DATE_FIELD,
    STATUS_NOTE_FIELD,
    STATUS_CATEGORY_FIELD,
    DAYS_UNTIL_SHIPMENT_FIELD,
]


# ===== HELPER FUNCTIONS =====

def get_assumed_year(user_input=None):
    """
    Get the year assumed for ETA tokens, with validation.

    Args:
        user_input: User-specified year (optional, int or numeric string)

    Returns:
        Validated four-digit year
    """
    default = RECOVERY_NOTE_RULES["assumed_year"]

    if user_input is None or str(user_input).strip() == "":
        return default

    try:
        year = int(str(user_input).strip())
    except ValueError:
        return default

    min_val = RECOVERY_NOTE_RULES["min_assumed_year"]
    max_val = RECOVERY_NOTE_RULES["max_assumed_year"]

    # Validate and clamp to allowed range
    return max(min_val, min(max_val, year))


def get_status_keyword_rules():
    """Return the ordered keyword rules (first match wins)."""
    return list(ORDER_STATUS_RULES["keyword_rules"])


def is_valid_status_category(category):
    """True if `category` is one of the fixed status categories."""
    return category in STATUS_CATEGORIES


def is_at_risk_category(category):
    """True if the category counts toward the At Risk summary."""
    return category in ORDER_STATUS_RULES["at_risk_categories"]


def get_expected_order_columns():
    """
    List the raw order columns the pipeline reads.

    The part-number column has alternate spellings and is looked up
    separately with find_part_number_column.

    Returns:
        List of column names (primary names only)
    """
    return [
        field["column"]
        for key, field in DATA_FIELD_DEFINITIONS["orders"].items()
        if key != "part_number"
    ]


def find_part_number_column(columns):
    """
    Find the part-number column in a header.

    Args:
        columns: Iterable of column names

    Returns:
        Matching column name, or None if the file has no part-number column
    """
    field = DATA_FIELD_DEFINITIONS["orders"]["part_number"]
    columns = list(columns)
    for candidate in [field["column"]] + field["alternate_columns"]:
        if candidate in columns:
            return candidate
    return None
