"""Unit tests for report generation"""

import pytest
from datetime import date, datetime, timezone
from credit_desk.domain.models import CustomerRecord, Payment
from credit_desk.domain.reports import (
    build_credit_analysis,
    build_customer_analysis,
    build_payment_analysis,
    export_filename,
    report_export_payload,
)
from credit_desk.domain.exceptions import InsufficientDataError

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_customer_analysis(sample_records: list[CustomerRecord]):
    data = build_customer_analysis(sample_records, now=NOW)

    assert data["total_customers"] == 2
    assert data["average_credit_score"] == 710
    assert data["status_distribution"] == {"excellent": 1, "good": 0, "fair": 1, "poor": 0}
    assert data["average_payment_commitment"] == 81.25
    assert data["total_debt"] == 1200.5
    assert data["generated_at"] == NOW.isoformat()


def test_payment_analysis():
    payments = [
        Payment(date(2024, 1, 1), 100, "paid", paid_date=date(2024, 1, 1)),
        Payment(date(2024, 2, 1), 100, "missed"),
    ]
    data = build_payment_analysis(payments, now=NOW)

    assert data["total_payments"] == 2
    assert data["on_time_rate"] == 50
    assert data["missed_rate"] == 50
    assert data["commitment_level"] == "poor"
    assert "generated_at" in data


def test_credit_analysis():
    calculations = [
        {"credit_limit": 45265, "risk_level": "low"},
        {"credit_limit": 6988, "risk_level": "high"},
        {"credit_limit": 20000, "risk_level": "medium"},
    ]
    data = build_credit_analysis(calculations, now=NOW)

    assert data["total_calculations"] == 3
    assert data["risk_distribution"] == {"low": 1, "medium": 1, "high": 1}
    assert data["total_credit_limit"] == 72253
    assert data["average_credit_limit"] == pytest.approx(24084.33)


@pytest.mark.parametrize("builder", [build_customer_analysis, build_payment_analysis, build_credit_analysis])
def test_reports_need_data(builder):
    with pytest.raises(InsufficientDataError):
        builder([])


def test_report_export_payload():
    payload = report_export_payload("Monthly", None, "custom", {"a": 1}, NOW)

    assert payload == {
        "title": "Monthly",
        "description": "",
        "type": "custom",
        "data": {"a": 1},
        "generated_at": NOW.isoformat(),
    }


def test_export_filename_collapses_whitespace():
    assert export_filename("Customer  analysis - Q1", NOW) == "Customer_analysis_-_Q1_2024-06-01.json"
