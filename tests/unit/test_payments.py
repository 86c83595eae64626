"""Unit tests for payment history analysis"""

import pytest
from datetime import date
from credit_desk.domain.models import Payment
from credit_desk.domain.payments import calculate_days_late, commitment_level, summarize_payments


def test_calculate_days_late():
    assert calculate_days_late(date(2024, 1, 10), date(2024, 1, 15)) == 5
    assert calculate_days_late(date(2024, 1, 10), date(2024, 1, 8)) == 0  # early
    assert calculate_days_late(date(2024, 1, 10), None) == 0


@pytest.mark.parametrize(
    "rate, expected",
    [
        (100, "excellent"),
        (95, "excellent"),
        (94.99, "very_good"),
        (85, "very_good"),
        (75, "good"),
        (60, "acceptable"),
        (59.9, "poor"),
        (0, "poor"),
    ],
)
def test_commitment_level_bands(rate, expected):
    assert commitment_level(rate) == expected


def test_summarize_mixed_history():
    payments = [
        Payment(date(2024, 1, 1), 500, "paid", paid_date=date(2024, 1, 1)),
        Payment(date(2024, 2, 1), 500, "paid", paid_date=date(2024, 1, 30)),
        Payment(date(2024, 3, 1), 500, "late", paid_date=date(2024, 3, 11), days_late=10),
        Payment(date(2024, 4, 1), 500, "paid", paid_date=date(2024, 4, 5), days_late=4),
        Payment(date(2024, 5, 1), 500, "missed"),
        Payment(date(2024, 6, 1), 250.5, "pending"),
    ]
    summary = summarize_payments(payments)

    assert summary.total_payments == 6
    assert summary.paid_on_time == 2
    assert summary.late_payments == 2  # status late, or paid with days late
    assert summary.missed_payments == 1
    assert summary.pending_payments == 1
    assert summary.on_time_rate == 33.33
    assert summary.late_rate == 33.33
    assert summary.missed_rate == 16.67
    assert summary.average_days_late == 7
    assert summary.total_amount == 2750.5
    assert summary.commitment_level == "poor"


def test_summarize_all_on_time():
    payments = [Payment(date(2024, m, 1), 100, "paid", paid_date=date(2024, m, 1)) for m in range(1, 5)]
    summary = summarize_payments(payments)

    assert summary.on_time_rate == 100
    assert summary.average_days_late == 0
    assert summary.commitment_level == "excellent"


def test_summarize_empty_history():
    summary = summarize_payments([])

    assert summary.total_payments == 0
    assert summary.on_time_rate == 0
    assert summary.late_rate == 0
    assert summary.total_amount == 0
    assert summary.commitment_level == "poor"
