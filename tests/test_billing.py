from types import SimpleNamespace

import pytest

from tutoring.core import billing


def record(n, status="present"):
    return SimpleNamespace(lesson_number=n, status=status)


def payment(*months):
    return SimpleNamespace(paid_months=[SimpleNamespace(month=m) for m in months])


def test_next_lesson_number_empty_history():
    assert billing.next_lesson_number([]) == 1


def test_next_lesson_number_unordered_history():
    assert billing.next_lesson_number([record(3), record(1), record(7), record(2)]) == 8


def test_next_lesson_number_reuses_deleted_max():
    history = [record(1), record(2), record(3)]
    assert billing.next_lesson_number(history) == 4
    history.pop()
    assert billing.next_lesson_number(history) == 3


@pytest.mark.parametrize("raw, expected", [(1, 1), (8, 8), (9, 1), (16, 8), (17, 1), (20, 4)])
def test_display_lesson_number(raw, expected):
    assert billing.display_lesson_number(raw) == expected


@pytest.mark.parametrize("raw, expected", [(1, 1), (8, 1), (9, 2), (16, 2), (17, 3), (64, 8), (65, 9)])
def test_billing_period(raw, expected):
    assert billing.billing_period(raw) == expected


@pytest.mark.parametrize("raw", [0, -1, -50])
def test_billing_period_clamps_non_positive(raw):
    assert billing.billing_period(raw) == 1


def test_billing_period_custom_bucket():
    assert billing.billing_period(5, bucket_size=4) == 2
    assert billing.display_lesson_number(5, bucket_size=4) == 1


def test_period_boundaries_contain_their_lessons():
    for period in range(1, 13):
        first = billing.first_lesson_of(period)
        last = billing.last_lesson_of(period)
        assert last - first + 1 == billing.LESSONS_PER_MONTH
        assert billing.billing_period(first) == period
        assert billing.billing_period(last) == period
        assert billing.billing_period(last + 1) == period + 1


def test_has_paid_for_lesson_empty():
    assert billing.has_paid_for_lesson([], 1) is False


def test_has_paid_for_lesson_matches_period():
    payments = [payment("الشهر الثاني")]
    assert billing.has_paid_for_lesson(payments, 9) is True
    assert billing.has_paid_for_lesson(payments, 16) is True
    assert billing.has_paid_for_lesson(payments, 8) is False
    assert billing.has_paid_for_lesson(payments, 17) is False


def test_has_paid_for_lesson_mixed_label_styles():
    payments = [payment("1"), payment("شهر3"), payment("كلام بدون رقم")]
    assert billing.has_paid_for_lesson(payments, 1) is True
    assert billing.has_paid_for_lesson(payments, 10) is False
    assert billing.has_paid_for_lesson(payments, 20) is True


def test_has_paid_for_lesson_twelfth_month():
    payments = [payment("الشهر الثاني عشر")]
    assert billing.has_paid_for_lesson(payments, 12 * 8) is True
    assert billing.has_paid_for_lesson(payments, 9) is False


def test_has_paid_for_lesson_payment_without_months():
    assert billing.has_paid_for_lesson([payment()], 1) is False


def test_paid_periods_deduplicated_and_sorted():
    payments = [payment("الشهر الثالث"), payment("3", "1"), payment("بدون"), payment("الشهر الأول")]
    assert billing.paid_periods(payments) == [1, 3]


def test_lesson_ten_is_covered_by_second_month():
    payments = [payment("الشهر الثاني")]
    assert billing.billing_period(10) == 2
    assert billing.has_paid_for_lesson(payments, 10) is True


def test_lesson_seventeen_is_covered_by_numeric_label():
    payments = [payment("3")]
    assert billing.billing_period(17) == 3
    assert billing.has_paid_for_lesson(payments, 17) is True


def test_first_lesson_without_payments():
    assert billing.has_paid_for_lesson([], 1) is False


def test_oversized_label_does_not_break_eligibility():
    payments = [payment("1" * 5000), payment("الشهر " + "7" * 5000), payment("الشهر الأول")]
    assert billing.has_paid_for_lesson(payments, 1) is True
    assert billing.has_paid_for_lesson(payments, 9) is False
    assert billing.paid_periods(payments) == [1]
