"""
Recovery Note Parsing
Reads the free-text "Recovery Date" field of an order into an ETA token and a
status note, then classifies the order into one of the fixed status categories.

A recovery note usually looks like:

    ETA 6/14
    POSSIBLE DATE SLIDE

The first line carries the ETA (month/day only, the year is assumed), the
remaining lines are status remarks checked against the keyword rules in
business_rules.ORDER_STATUS_RULES.
"""

import re
from datetime import date

from business_rules import (
    ETA_DATE_FIELD,
    STATUS_CATEGORY_FIELD,
    STATUS_NOTE_FIELD,
    ORDER_STATUS_RULES,
    RECOVERY_NOTE_RULES,
    get_assumed_year,
    get_status_keyword_rules,
    is_valid_status_category,
)
from utils import is_blank, resolve_today

ETA_SENTINEL = RECOVERY_NOTE_RULES["eta_sentinel"]
_ETA_PATTERN = re.compile(RECOVERY_NOTE_RULES["eta_pattern"])
_LINE_BREAK = '\n'


def build_eta_date(month, day, year):
    """
    Build a calendar date from month/day parts.

    Returns:
        datetime.date, or None if the parts do not form a real date
    """
    try:
        return date(int(year), int(month), int(day))
    except (TypeError, ValueError):
        return None


def eta_token_to_date(eta_token, assumed_year=None):
    """
    Convert an ETA token ("6/14" or "6/14/25") to a date in the assumed year.

    Any year suffix on the token is ignored; the assumed year always wins.

    Returns:
        datetime.date, or None for the TBD sentinel or a malformed token
    """
    if is_blank(eta_token) or eta_token == ETA_SENTINEL:
        return None

    parts = str(eta_token).split('/')
    if len(parts) < 2:
        return None

    return build_eta_date(parts[0], parts[1], get_assumed_year(assumed_year))


def extract_recovery_note(note, assumed_year=None):
    """
    Split a recovery note into (eta_token, status_note).

    - Empty note: ("TBD", "")
    - "ETA <m>/<d>" anywhere in the text (case-sensitive) gives "<m>/<d>/<yy>",
      where yy is the two-digit assumed year. A month/day that is not a real
      date in that year is ignored and the token stays "TBD".
    - Status note: only built when the note spans several lines. Lines are
      trimmed, empty lines dropped, lines starting with "ETA" dropped, and the
      rest joined with single spaces. A single-line note has no status note.

    Args:
        note: raw value of the recovery note field (str, None or NaN)
        assumed_year: year for ETA tokens (defaults to business_rules)

    Returns:
        tuple: (eta_token, status_note)
    """
    if is_blank(note):
        return ETA_SENTINEL, ""

    text = str(note)
    year = get_assumed_year(assumed_year)

    eta_token = ETA_SENTINEL
    match = _ETA_PATTERN.search(text)
    if match:
        month_day = match.group(1)
        month, day = month_day.split('/')
        if build_eta_date(month, day, year) is not None:
            eta_token = f"{month_day}/{year % 100:02d}"

    status_note = ""
    if _LINE_BREAK in text:
        prefix = RECOVERY_NOTE_RULES["eta_line_prefix"]
        lines = [line.strip() for line in text.split(_LINE_BREAK)]
        status_note = " ".join(line for line in lines if line and not line.startswith(prefix))

    return eta_token, status_note


def match_status_rule(status_note, rules=None):
    """
    Return the first keyword rule whose keyword appears in the status note.

    Args:
        status_note: residual note text
        rules: ordered StatusRule list (defaults to business_rules)

    Returns:
        StatusRule or None

    Raises:
        ValueError: if a custom rule maps to an unknown status category
    """
    if is_blank(status_note):
        return None

    if rules is None:
        rules = get_status_keyword_rules()
    else:
        unknown = [rule.category for rule in rules if not is_valid_status_category(rule.category)]
        if unknown:
            raise ValueError(f"Unknown status categories in rules: {unknown}")

    for rule in rules:
        if rule.keyword in status_note:
            return rule
    return None


def classify_status(status_note, eta_token, today=None, assumed_year=None, rules=None):
    """
    Classify an order from its status note and ETA token.

    Order of evaluation (first match wins):
    1. keyword rules on the status note (PENDING, COMPLETE, POSSIBLE DATE SLIDE, CREDIT HOLD)
    2. no ETA -> Pending
    3. ETA strictly before today -> Late, otherwise On Time

    The empty-note case (Unknown) is handled by the caller before this runs.

    Args:
        status_note: residual status text from extract_recovery_note
        eta_token: ETA token or "TBD"
        today: reference date (date, datetime, Timestamp or ISO string; defaults to today)
        assumed_year: year used to read the ETA token
        rules: ordered StatusRule list override

    Returns:
        str: one of business_rules.STATUS_CATEGORIES
    """
    rule = match_status_rule(status_note, rules)
    if rule is not None:
        return rule.category

    eta = eta_token_to_date(eta_token, assumed_year)
    if eta is None:
        return ORDER_STATUS_RULES["no_eta_category"]

    if eta < resolve_today(today):
        return ORDER_STATUS_RULES["eta_before_today_category"]
    return ORDER_STATUS_RULES["eta_on_or_after_today_category"]


def parse_recovery_note(note, today=None, assumed_year=None):
    """
    Extract and classify a recovery note in one step.

    Returns:
        dict with etaDate, statusNote, statusCategory
    """
    eta_token, status_note = extract_recovery_note(note, assumed_year)

    if is_blank(note):
        category = ORDER_STATUS_RULES["empty_note_category"]
    else:
        category = classify_status(status_note, eta_token, today, assumed_year)

    return {
        ETA_DATE_FIELD: eta_token,
        STATUS_NOTE_FIELD: status_note,
        STATUS_CATEGORY_FIELD: category,
    }
