# tutoring/core/billing.py
"""
Lesson numbering and billing periods.

Every attendance record carries a raw lesson number that only grows for a
student. Raw numbers are grouped into fixed buckets (8 lessons by default),
each bucket being one payable "month":

    lessons 1..8  -> period 1
    lessons 9..16 -> period 2

All functions here are pure and work on collections that were already
fetched; they never touch the database and never raise on empty input.
"""
import logging
from typing import Iterable, List

from tutoring.core.months import resolve_month_label

logger = logging.getLogger(__name__)

LESSONS_PER_MONTH = 8


def next_lesson_number(history: Iterable) -> int:
    """
    Next raw lesson number for a student: ``max + 1``, or 1 for no history.

    Computed from the current max, so deleting the newest record makes its
    number available again.
    """
    numbers = [record.lesson_number for record in history]
    if not numbers:
        return 1
    return max(numbers) + 1


def display_lesson_number(raw_lesson_number: int, bucket_size: int = LESSONS_PER_MONTH) -> int:
    return ((raw_lesson_number - 1) % bucket_size) + 1


def billing_period(raw_lesson_number: int, bucket_size: int = LESSONS_PER_MONTH) -> int:
    if raw_lesson_number <= 0:
        # malformed upstream data: clamp instead of failing the scan
        logger.debug(f"Lesson number {raw_lesson_number} clamped to period 1")
        return 1
    return -(-raw_lesson_number // bucket_size)


def first_lesson_of(period: int, bucket_size: int = LESSONS_PER_MONTH) -> int:
    return (period - 1) * bucket_size + 1


def last_lesson_of(period: int, bucket_size: int = LESSONS_PER_MONTH) -> int:
    return period * bucket_size


def has_paid_for_lesson(payments: Iterable, raw_lesson_number: int,
                        bucket_size: int = LESSONS_PER_MONTH) -> bool:
    """True if any paid month of any payment covers the lesson's period."""
    required = billing_period(raw_lesson_number, bucket_size)
    return any(
        resolve_month_label(paid_month.month) == required
        for payment in payments
        for paid_month in payment.paid_months
    )


def paid_periods(payments: Iterable) -> List[int]:
    """Resolved periods covered by the payments, de-duplicated and sorted."""
    periods = {
        resolve_month_label(paid_month.month)
        for payment in payments
        for paid_month in payment.paid_months
    }
    periods.discard(0)
    return sorted(periods)
