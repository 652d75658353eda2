# tutoring/core/months.py
"""
Paid-month labels.

Labels reached the payments table through several UI paths over time: plain
numbers ("3"), canonical Arabic labels ("الشهر الثالث") and free text
("شهر3"). ``resolve_month_label`` turns any of them into a billing-period
number so it can be compared with ``billing.billing_period``. It never
raises; 0 means "no numeric meaning found" and never equals a valid period.
"""
import re
from typing import Any

MONTH_LABELS = [
    "الشهر الأول",
    "الشهر الثاني",
    "الشهر الثالث",
    "الشهر الرابع",
    "الشهر الخامس",
    "الشهر السادس",
    "الشهر السابع",
    "الشهر الثامن",
    "الشهر التاسع",
    "الشهر العاشر",
    "الشهر الحادي عشر",
    "الشهر الثاني عشر",
]

UNRESOLVED = 0
MAX_DIGITS = 9

# Compound ordinals first: "الثاني عشر" contains "الثاني".
_ORDINALS = (
    ("الحادي عشر", 11),
    ("الثاني عشر", 12),
    ("الأول", 1),
    ("الثاني", 2),
    ("الثالث", 3),
    ("الرابع", 4),
    ("الخامس", 5),
    ("السادس", 6),
    ("السابع", 7),
    ("الثامن", 8),
    ("التاسع", 9),
    ("العاشر", 10),
)

_INTEGER = re.compile(r"[+-]?\d+")
_EMBEDDED_NUMBER = (
    re.compile(r"الشهر\s*(\d+)"),
    re.compile(r"شهر\s*(\d+)"),
    re.compile(r"(\d+)"),
)


def _to_int(digits: str) -> int:
    # no billing period has ten digits; longer runs would also hit the int-string limit
    if len(digits.lstrip("+-").lstrip("0")) > MAX_DIGITS:
        return UNRESOLVED
    return int(digits)


def resolve_month_label(label: Any) -> int:
    if label is None:
        return UNRESOLVED
    text = label if isinstance(label, str) else str(label)
    text = text.strip()

    if _INTEGER.fullmatch(text):
        value = _to_int(text)
        return value if value > 0 else UNRESOLVED

    for phrase, number in _ORDINALS:
        if phrase in text:
            return number

    for pattern in _EMBEDDED_NUMBER:
        match = pattern.search(text)
        if match:
            return _to_int(match.group(1))

    return UNRESOLVED


def month_label(number: int) -> str:
    """Canonical label for periods 1..12, the plain number above that."""
    if 1 <= number <= len(MONTH_LABELS):
        return MONTH_LABELS[number - 1]
    return str(number)
