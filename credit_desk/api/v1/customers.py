"""Customer CRUD, CSV export and import template endpoints"""

import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from starlette.responses import Response

from credit_desk.api.v1.schemas import CustomerCreate, CustomerUpdate, CustomerResponse, CustomerListResponse
from credit_desk.api.dependencies import get_current_user_id, get_request_id, parse_uuid
from credit_desk.infrastructure.database.session import get_db
from credit_desk.infrastructure.database.models import Customer
from credit_desk.infrastructure.database.repositories import CustomerRepository, to_customer_record
from credit_desk.domain.models import CustomerRecord
from credit_desk.domain.importer import derive_status
from credit_desk.domain.spreadsheets import export_customers_csv, template_csv
from credit_desk.utils.http_utils import content_disposition

router = APIRouter()

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def to_customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        customer_id=str(customer.id),
        customer_code=customer.customer_code,
        name=customer.name,
        phone=customer.phone,
        credit_score=customer.credit_score,
        payment_commitment=customer.payment_commitment,
        haggling_level=customer.haggling_level,
        purchase_willingness=customer.purchase_willingness,
        last_payment=customer.last_payment_date,
        total_debt=customer.total_debt,
        installment_amount=customer.installment_amount,
        status=customer.status,
        created_at=customer.created_at.isoformat(),
    )


def _csv_attachment(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.get("/customers", response_model=CustomerListResponse)
def list_customers(
    search: Optional[str] = Query(None, description="Match on name, phone or customer code"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    customers = CustomerRepository(db).list_customers(user_id, search=search)
    return CustomerListResponse(customers=[to_customer_response(c) for c in customers])


@router.post("/customers", response_model=CustomerResponse, status_code=201)
def create_customer(
    request_body: CustomerCreate,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Add a customer; status follows the credit score unless given explicitly"""
    record = CustomerRecord(
        name=request_body.name,
        phone=request_body.phone,
        credit_score=request_body.credit_score,
        payment_commitment=request_body.payment_commitment,
        haggling_level=request_body.haggling_level,
        purchase_willingness=request_body.purchase_willingness,
        last_payment=request_body.last_payment.isoformat() if request_body.last_payment else "",
        total_debt=request_body.total_debt,
        installment_amount=request_body.installment_amount,
        status=request_body.status or derive_status(request_body.credit_score),
        customer_code=request_body.customer_code or "",
    )

    try:
        db_customer = CustomerRepository(db).create_customer(user_id, record)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save customer: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")
    return to_customer_response(db_customer)


@router.get("/customers/export")
def export_customers(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """All of the user's customers as CSV in the import layout"""
    customers = CustomerRepository(db).list_customers(user_id)
    if not customers:
        raise HTTPException(status_code=404, detail="No customers to export")

    content = export_customers_csv(to_customer_record(c) for c in customers)
    return _csv_attachment(content, f"customers_{date.today().isoformat()}.csv")


@router.get("/customers/template")
def download_template():
    """Blank import template with the documented header row"""
    return _csv_attachment(template_csv(), "customers_template.csv")


@router.get("/customers/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    customer = CustomerRepository(db).get_customer(user_id, parse_uuid(customer_id, "customer"))
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return to_customer_response(customer)


@router.patch("/customers/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: str,
    request_body: CustomerUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Partial update; a new credit score re-derives status unless status is also given"""
    changes = request_body.model_dump(exclude_unset=True)
    if "last_payment" in changes:
        changes["last_payment_date"] = changes.pop("last_payment")
    if changes.get("credit_score") is not None and changes.get("status") is None:
        changes["status"] = derive_status(changes["credit_score"])
    # Columns are NOT NULL; explicit nulls mean "leave unchanged"
    changes = {k: v for k, v in changes.items() if v is not None or k == "last_payment_date"}

    customer = CustomerRepository(db).update_customer(user_id, parse_uuid(customer_id, "customer"), changes)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    db.commit()
    return to_customer_response(customer)


@router.delete("/customers/{customer_id}", status_code=204)
def delete_customer(
    customer_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not CustomerRepository(db).delete_customer(user_id, parse_uuid(customer_id, "customer")):
        raise HTTPException(status_code=404, detail="Customer not found")
    db.commit()
    return Response(status_code=204)
