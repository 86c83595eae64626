"""Report endpoints: CRUD, generated analyses and JSON export"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.responses import Response

from credit_desk.api.v1.schemas import ReportCreate, ReportUpdate, ReportResponse, ReportListResponse
from credit_desk.api.dependencies import get_current_user_id, get_request_id, parse_uuid
from credit_desk.infrastructure.database.session import get_db
from credit_desk.infrastructure.database.models import Report
from credit_desk.infrastructure.database.repositories import (
    CreditCalculationRepository,
    CustomerRepository,
    PaymentRepository,
    ReportRepository,
    to_customer_record,
    to_payment,
)
from credit_desk.domain.reports import (
    build_credit_analysis,
    build_customer_analysis,
    build_payment_analysis,
    export_filename,
    report_export_payload,
)
from credit_desk.domain.exceptions import InsufficientDataError
from credit_desk.utils.http_utils import content_disposition

router = APIRouter()

GENERATED_TITLES = {
    "customer_analysis": ("Customer analysis", "Customer behaviour and credit score overview"),
    "payment_analysis": ("Payment analysis", "Payment patterns and commitment"),
    "credit_analysis": ("Credit analysis", "Distribution of saved credit limit calculations"),
}


def to_report_response(report: Report) -> ReportResponse:
    return ReportResponse(
        report_id=str(report.id),
        title=report.title,
        description=report.description or "",
        report_type=report.report_type,
        filters=report.filters,
        data=report.data,
        created_at=report.created_at.isoformat(),
    )


@router.get("/reports", response_model=ReportListResponse)
def list_reports(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    reports = ReportRepository(db).list_reports(user_id)
    return ReportListResponse(reports=[to_report_response(r) for r in reports])


@router.post("/reports", response_model=ReportResponse, status_code=201)
def create_report(
    request_body: ReportCreate,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        report = ReportRepository(db).create_report(
            user_id=user_id,
            title=request_body.title,
            description=request_body.description,
            report_type=request_body.report_type,
            filters=request_body.filters,
            data=request_body.data,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save report: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")
    return to_report_response(report)


@router.post("/reports/generate/{report_type}", response_model=ReportResponse, status_code=201)
def generate_report(
    report_type: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Snapshot an analysis of the user's current data as a stored report.

    Supported types: customer_analysis, payment_analysis, credit_analysis.
    """
    if report_type not in GENERATED_TITLES:
        raise HTTPException(status_code=404, detail=f"Unknown report type: {report_type}")

    now = datetime.now(timezone.utc)
    try:
        if report_type == "customer_analysis":
            customers = CustomerRepository(db).list_customers(user_id)
            data = build_customer_analysis([to_customer_record(c) for c in customers], now=now)
        elif report_type == "payment_analysis":
            payments = PaymentRepository(db).list_payments(user_id)
            data = build_payment_analysis([to_payment(p) for p in payments], now=now)
        else:
            calculations = CreditCalculationRepository(db).list_calculations(user_id)
            data = build_credit_analysis(
                [{"credit_limit": c.calculated_credit_limit, "risk_level": c.risk_level} for c in calculations],
                now=now,
            )
    except InsufficientDataError as e:
        logging.warning(f"Report not generated: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    title, description = GENERATED_TITLES[report_type]
    try:
        report = ReportRepository(db).create_report(
            user_id=user_id,
            title=f"{title} - {now.date().isoformat()}",
            description=description,
            report_type=report_type,
            data=data,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save report: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")
    return to_report_response(report)


@router.get("/reports/{report_id}/export")
def export_report(
    report_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Stored report as a downloadable JSON document"""
    report = ReportRepository(db).get_report(user_id, parse_uuid(report_id, "report"))
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    payload = report_export_payload(
        title=report.title,
        description=report.description,
        report_type=report.report_type,
        data=report.data,
        created_at=report.created_at,
    )
    filename = export_filename(report.title, datetime.now(timezone.utc))
    return JSONResponse(
        content=payload,
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.patch("/reports/{report_id}", response_model=ReportResponse)
def update_report(
    report_id: str,
    request_body: ReportUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    changes = request_body.model_dump(exclude_unset=True)
    for column in ("title", "report_type"):
        if column in changes and changes[column] is None:
            del changes[column]

    report = ReportRepository(db).update_report(user_id, parse_uuid(report_id, "report"), changes)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    db.commit()
    return to_report_response(report)


@router.delete("/reports/{report_id}", status_code=204)
def delete_report(
    report_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not ReportRepository(db).delete_report(user_id, parse_uuid(report_id, "report")):
        raise HTTPException(status_code=404, detail="Report not found")
    db.commit()
    return Response(status_code=204)
