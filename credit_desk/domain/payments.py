"""Payment history analysis"""

from datetime import date
from typing import List, Optional
from credit_desk.domain.models import Payment, PaymentSummary
from credit_desk.utils.date_utils import days_between


def calculate_days_late(due_date: date, paid_date: Optional[date]) -> int:
    """Days past due at payment time; 0 for unpaid or early payments"""
    if paid_date is None:
        return 0
    return max(0, days_between(due_date, paid_date))


def commitment_level(on_time_rate: float) -> str:
    """
    Label payment commitment from the on-time rate (percent).

    Bands: 95+ excellent, 85+ very_good, 75+ good, 60+ acceptable, else poor.
    """
    if on_time_rate >= 95:
        return "excellent"
    elif on_time_rate >= 85:
        return "very_good"
    elif on_time_rate >= 75:
        return "good"
    elif on_time_rate >= 60:
        return "acceptable"
    return "poor"


def _rate(count: int, total: int) -> float:
    return round(count / total * 100, 2) if total > 0 else 0.0


def summarize_payments(payments: List[Payment]) -> PaymentSummary:
    """
    Aggregate payment behaviour.

    A payment counts as late when its status is "late" or it carries days
    late; on time means paid with no days late. Rates are percentages of all
    payments and are 0 for an empty history.
    """
    total = len(payments)
    paid_on_time = sum(1 for p in payments if p.status == "paid" and p.days_late == 0)
    late = sum(1 for p in payments if p.status == "late" or p.days_late > 0)
    missed = sum(1 for p in payments if p.status == "missed")
    pending = sum(1 for p in payments if p.status == "pending")

    late_days = [p.days_late for p in payments if p.days_late > 0]
    average_days_late = round(sum(late_days) / len(late_days), 2) if late_days else 0.0

    on_time_rate = _rate(paid_on_time, total)

    return PaymentSummary(
        total_payments=total,
        paid_on_time=paid_on_time,
        late_payments=late,
        missed_payments=missed,
        pending_payments=pending,
        on_time_rate=on_time_rate,
        late_rate=_rate(late, total),
        missed_rate=_rate(missed, total),
        average_days_late=average_days_late,
        total_amount=sum(p.amount for p in payments),
        commitment_level=commitment_level(on_time_rate),
    )
