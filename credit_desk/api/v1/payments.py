"""Payment record endpoints and payment behaviour summary"""

import logging
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from starlette.responses import Response

from credit_desk.api.v1.schemas import (
    PaymentCreate,
    PaymentUpdate,
    PaymentResponse,
    PaymentListResponse,
    PaymentSummaryResponse,
)
from credit_desk.api.dependencies import get_current_user_id, get_request_id, parse_uuid
from credit_desk.infrastructure.database.session import get_db
from credit_desk.infrastructure.database.models import PaymentRecord
from credit_desk.infrastructure.database.repositories import CustomerRepository, PaymentRepository, to_payment
from credit_desk.domain.payments import calculate_days_late, summarize_payments

router = APIRouter()


def to_payment_response(payment: PaymentRecord) -> PaymentResponse:
    return PaymentResponse(
        payment_id=str(payment.id),
        customer_id=str(payment.customer_id),
        due_date=payment.due_date,
        paid_date=payment.paid_date,
        amount=payment.amount,
        status=payment.status,
        days_late=payment.days_late or 0,
        notes=payment.notes or "",
    )


@router.get("/payments", response_model=PaymentListResponse)
def list_payments(
    customer_id: Optional[str] = Query(None, description="Restrict to one customer"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    customer_uuid = parse_uuid(customer_id, "customer") if customer_id else None
    payments = PaymentRepository(db).list_payments(user_id, customer_id=customer_uuid)
    return PaymentListResponse(payments=[to_payment_response(p) for p in payments])


@router.get("/payments/summary", response_model=PaymentSummaryResponse)
def get_payment_summary(
    customer_id: Optional[str] = Query(None, description="Restrict to one customer"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """On-time, late and missed rates plus commitment level"""
    customer_uuid = parse_uuid(customer_id, "customer") if customer_id else None
    payments = PaymentRepository(db).list_payments(user_id, customer_id=customer_uuid)
    summary = summarize_payments([to_payment(p) for p in payments])
    return PaymentSummaryResponse(**asdict(summary))


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(
    request_body: PaymentCreate,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record a payment for one of the user's customers"""
    if not CustomerRepository(db).get_customer(user_id, request_body.customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")

    days_late = request_body.days_late
    if days_late is None:
        days_late = calculate_days_late(request_body.due_date, request_body.paid_date)

    try:
        payment = PaymentRepository(db).create_payment(
            user_id=user_id,
            customer_id=request_body.customer_id,
            due_date=request_body.due_date,
            amount=request_body.amount,
            status=request_body.status,
            paid_date=request_body.paid_date,
            days_late=days_late,
            notes=request_body.notes,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save payment: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")
    return to_payment_response(payment)


@router.patch("/payments/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: str,
    request_body: PaymentUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Partial update; days late are recomputed when either date changes"""
    repo = PaymentRepository(db)
    payment_uuid = parse_uuid(payment_id, "payment")
    payment = repo.get_payment(user_id, payment_uuid)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")

    changes = request_body.model_dump(exclude_unset=True)
    for column in ("due_date", "amount", "status", "days_late"):
        if column in changes and changes[column] is None:
            del changes[column]
    if "days_late" not in changes and ("due_date" in changes or "paid_date" in changes):
        changes["days_late"] = calculate_days_late(
            changes.get("due_date", payment.due_date),
            changes.get("paid_date", payment.paid_date),
        )

    payment = repo.update_payment(user_id, payment_uuid, changes)
    db.commit()
    return to_payment_response(payment)


@router.delete("/payments/{payment_id}", status_code=204)
def delete_payment(
    payment_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not PaymentRepository(db).delete_payment(user_id, parse_uuid(payment_id, "payment")):
        raise HTTPException(status_code=404, detail="Payment not found")
    db.commit()
    return Response(status_code=204)
