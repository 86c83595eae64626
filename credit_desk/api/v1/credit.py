"""Credit limit calculator endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from credit_desk.api.v1.schemas import (
    AssessmentRequest,
    AssessmentResponse,
    FactorSchema,
    CalculationItem,
    CalculationHistoryResponse,
)
from credit_desk.api.dependencies import get_current_user_id, get_request_id
from credit_desk.infrastructure.database.session import get_db
from credit_desk.infrastructure.database.repositories import CreditCalculationRepository, CustomerRepository
from credit_desk.domain.models import ApplicantProfile
from credit_desk.domain.scoring import assess_credit
from credit_desk.domain.exceptions import InvalidApplicantError
from credit_desk.infrastructure.observability.metrics import record_assessment
from credit_desk.infrastructure.observability.logging import log_assessment
from credit_desk.config import settings

router = APIRouter()


@router.post("/credit/assessments", response_model=AssessmentResponse)
def create_assessment(
    request_body: AssessmentRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Suggest a credit limit and risk tier.

    Flow:
    1. Score the applicant profile
    2. Optionally persist the calculation (linked to one of the user's customers)
    3. Record metrics and log the outcome
    """
    request_id = get_request_id(request)

    profile = ApplicantProfile(
        monthly_income=request_body.monthly_income,
        current_debt=request_body.current_debt,
        credit_score=request_body.credit_score,
        payment_history_percent=request_body.payment_history_percent,
        years_with_store=request_body.years_with_store,
    )

    try:
        assessment = assess_credit(profile)
    except InvalidApplicantError as e:
        logging.warning(f"Invalid applicant: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    calculation_id = None
    if request_body.save:
        if request_body.customer_id and not CustomerRepository(db).get_customer(user_id, request_body.customer_id):
            raise HTTPException(status_code=404, detail="Customer not found")

        try:
            db_calculation = CreditCalculationRepository(db).create_calculation(
                user_id=user_id,
                profile=profile,
                assessment=assessment,
                customer_id=request_body.customer_id,
            )
            db.commit()
        except Exception as e:
            db.rollback()
            logging.error(f"Failed to save calculation: {e}", extra={"request_id": request_id})
            raise HTTPException(status_code=500, detail="Internal server error")
        calculation_id = str(db_calculation.id)

    record_assessment(assessment.risk_level, assessment.credit_limit)
    log_assessment(request_id, user_id, assessment.risk_level, assessment.credit_limit, request_body.save)

    return AssessmentResponse(
        credit_limit=assessment.credit_limit,
        risk_level=assessment.risk_level,
        debt_ratio=assessment.debt_ratio,
        factors=[
            FactorSchema(name=f.name, impact_percent=f.impact_percent, description=f.description)
            for f in assessment.factors
        ],
        calculation_id=calculation_id,
    )


@router.get("/credit/assessments", response_model=CalculationHistoryResponse)
def list_assessments(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Most recent saved calculations for the signed-in user"""
    calculations = CreditCalculationRepository(db).list_calculations(user_id, limit=settings.recent_history_limit)

    return CalculationHistoryResponse(
        calculations=[
            CalculationItem(
                calculation_id=str(c.id),
                customer_id=str(c.customer_id) if c.customer_id else None,
                monthly_income=c.monthly_income,
                current_debt=c.current_debt,
                credit_score=c.credit_score,
                payment_history_percent=c.payment_history,
                years_with_store=c.years_with_store,
                credit_limit=c.calculated_credit_limit,
                risk_level=c.risk_level,
                created_at=c.created_at.isoformat(),
            )
            for c in calculations
        ]
    )
