"""Report generation - aggregate snapshots stored as report data"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from credit_desk.domain.models import CustomerRecord, Payment, CUSTOMER_STATUSES, RISK_LEVELS
from credit_desk.domain.payments import summarize_payments
from credit_desk.domain.exceptions import InsufficientDataError


def _generated_at(now: Optional[datetime]) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def build_customer_analysis(customers: Sequence[CustomerRecord], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Credit score, status mix, commitment and debt across the customer book"""
    if not customers:
        raise InsufficientDataError("No customers available for a customer analysis report")

    total = len(customers)
    return {
        "total_customers": total,
        "average_credit_score": round(sum(c.credit_score for c in customers) / total, 2),
        "status_distribution": {
            status: sum(1 for c in customers if c.status == status) for status in CUSTOMER_STATUSES
        },
        "average_payment_commitment": round(sum(c.payment_commitment for c in customers) / total, 2),
        "total_debt": sum(c.total_debt for c in customers),
        "generated_at": _generated_at(now),
    }


def build_payment_analysis(payments: Sequence[Payment], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Payment summary snapshot"""
    if not payments:
        raise InsufficientDataError("No payment records available for a payment analysis report")

    data = asdict(summarize_payments(list(payments)))
    data["generated_at"] = _generated_at(now)
    return data


def build_credit_analysis(calculations: Sequence[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Distribution of saved credit calculations.

    Each calculation is a mapping with "credit_limit" and "risk_level".
    """
    if not calculations:
        raise InsufficientDataError("No credit calculations available for a credit analysis report")

    limits: List[int] = [c["credit_limit"] for c in calculations]
    return {
        "total_calculations": len(calculations),
        "risk_distribution": {
            level: sum(1 for c in calculations if c["risk_level"] == level) for level in RISK_LEVELS
        },
        "average_credit_limit": round(sum(limits) / len(limits), 2),
        "total_credit_limit": sum(limits),
        "generated_at": _generated_at(now),
    }


def report_export_payload(
    title: str,
    description: Optional[str],
    report_type: str,
    data: Optional[Dict[str, Any]],
    created_at: Optional[datetime],
) -> Dict[str, Any]:
    """Downloadable representation of a stored report"""
    return {
        "title": title,
        "description": description or "",
        "type": report_type,
        "data": data,
        "generated_at": created_at.isoformat() if created_at else None,
    }


def export_filename(title: str, today: datetime) -> str:
    """Attachment name: title with whitespace runs replaced by underscores, plus date"""
    return f"{'_'.join(title.split())}_{today.date().isoformat()}.json"
