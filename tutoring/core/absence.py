# tutoring/core/absence.py
from typing import Iterable

TOTAL_ABSENCE_LIMIT = 3
CLOSE_ABSENCE_WINDOW_DAYS = 7


def should_block_for_absence(history: Iterable, calendar_month: int,
                             total_limit: int = TOTAL_ABSENCE_LIMIT,
                             window_days: int = CLOSE_ABSENCE_WINDOW_DAYS) -> bool:
    """
    Video blocking rule for absences.

    Blocked when the student has ``total_limit`` absences overall, or two
    absences no more than ``window_days`` apart inside ``calendar_month``.
    """
    absences = [record for record in history if record.status == "absent"]
    if len(absences) >= total_limit:
        return True

    in_month = sorted(
        record.date for record in absences
        if record.date is not None and record.date.month == calendar_month
    )
    return any(
        (later - earlier).days <= window_days
        for earlier, later in zip(in_month, in_month[1:])
    )
