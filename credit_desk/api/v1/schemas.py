"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field, UUID4
from datetime import date
from typing import Any, Dict, List, Literal, Optional
from credit_desk.domain.models import MAX_CUSTOMER_CODE_LENGTH

RiskLevel = Literal["low", "medium", "high"]
CustomerStatus = Literal["excellent", "good", "fair", "poor"]
PaymentStatus = Literal["paid", "late", "pending", "missed"]
ReportType = Literal["customer_analysis", "payment_analysis", "credit_analysis", "custom"]

PHONE_PATTERN = r"^[0-9+\-\s()]+$"
MAX_AMOUNT = 1_000_000_000  # Upper bound for incomes, debts and payment amounts


# Credit assessments


class AssessmentRequest(BaseModel):
    """Request body for POST /v1/credit/assessments"""

    monthly_income: float = Field(..., ge=0, le=MAX_AMOUNT, description="Monthly income; must be above zero to score")
    current_debt: float = Field(0, ge=0, le=MAX_AMOUNT)
    credit_score: int = Field(..., ge=300, le=850)
    payment_history_percent: float = Field(..., ge=0, le=100, description="Share of on-time payments")
    years_with_store: float = Field(0, ge=0)
    customer_id: Optional[UUID4] = None
    save: bool = Field(False, description="Persist the calculation")


class FactorSchema(BaseModel):
    name: str
    impact_percent: float
    description: str


class AssessmentResponse(BaseModel):
    """Response for POST /v1/credit/assessments"""

    credit_limit: int
    risk_level: RiskLevel
    debt_ratio: float
    factors: List[FactorSchema]
    calculation_id: Optional[str] = None


class CalculationItem(BaseModel):
    """Saved calculation in history"""

    calculation_id: str
    customer_id: Optional[str] = None
    monthly_income: float
    current_debt: float
    credit_score: int
    payment_history_percent: float
    years_with_store: float
    credit_limit: int
    risk_level: RiskLevel
    created_at: str


class CalculationHistoryResponse(BaseModel):
    """Response for GET /v1/credit/assessments"""

    calculations: List[CalculationItem]


# Customers


class CustomerCreate(BaseModel):
    """Request body for POST /v1/customers; status is derived from credit score when omitted"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1, pattern=PHONE_PATTERN)
    customer_code: Optional[str] = Field(None, max_length=MAX_CUSTOMER_CODE_LENGTH)
    credit_score: int = Field(650, ge=300, le=850)
    payment_commitment: float = Field(75, ge=0, le=100)
    haggling_level: int = Field(5, ge=1, le=10)
    purchase_willingness: int = Field(7, ge=1, le=10)
    last_payment: Optional[date] = None
    total_debt: float = Field(0, ge=0, le=MAX_AMOUNT)
    installment_amount: float = Field(0, ge=0, le=MAX_AMOUNT)
    status: Optional[CustomerStatus] = None


class CustomerUpdate(BaseModel):
    """Request body for PATCH /v1/customers/{customer_id}"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1, pattern=PHONE_PATTERN)
    credit_score: Optional[int] = Field(None, ge=300, le=850)
    payment_commitment: Optional[float] = Field(None, ge=0, le=100)
    haggling_level: Optional[int] = Field(None, ge=1, le=10)
    purchase_willingness: Optional[int] = Field(None, ge=1, le=10)
    last_payment: Optional[date] = None
    total_debt: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)
    installment_amount: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)
    status: Optional[CustomerStatus] = None


class CustomerResponse(BaseModel):
    customer_id: str
    customer_code: str
    name: str
    phone: str
    credit_score: int
    payment_commitment: float
    haggling_level: int
    purchase_willingness: int
    last_payment: Optional[date] = None
    total_debt: float
    installment_amount: float
    status: CustomerStatus
    created_at: str


class CustomerListResponse(BaseModel):
    customers: List[CustomerResponse]


# Imports


class ImportedCustomerSchema(BaseModel):
    """Normalized row as it would be stored"""

    customer_code: str
    name: str
    phone: str
    credit_score: int
    payment_commitment: float
    haggling_level: int
    purchase_willingness: int
    last_payment: str
    total_debt: float
    installment_amount: float
    status: CustomerStatus


class ImportPreviewResponse(BaseModel):
    """Response for POST /v1/imports/preview"""

    total_rows: int
    valid_rows: int
    error_count: int
    errors: List[str]
    records: List[ImportedCustomerSchema]


class ImportCommitResponse(BaseModel):
    """Response for POST /v1/imports"""

    imported: int
    customer_ids: List[str]
    error_count: int
    errors: List[str]


# Payments


class PaymentCreate(BaseModel):
    """Request body for POST /v1/payments; days_late is computed from the dates when omitted"""

    customer_id: UUID4
    due_date: date
    amount: float = Field(..., gt=0, le=MAX_AMOUNT)
    status: PaymentStatus = "pending"
    paid_date: Optional[date] = None
    days_late: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    due_date: Optional[date] = None
    amount: Optional[float] = Field(None, gt=0, le=MAX_AMOUNT)
    status: Optional[PaymentStatus] = None
    paid_date: Optional[date] = None
    days_late: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    payment_id: str
    customer_id: str
    due_date: date
    paid_date: Optional[date] = None
    amount: float
    status: PaymentStatus
    days_late: int
    notes: str


class PaymentListResponse(BaseModel):
    payments: List[PaymentResponse]


class PaymentSummaryResponse(BaseModel):
    """Response for GET /v1/payments/summary"""

    total_payments: int
    paid_on_time: int
    late_payments: int
    missed_payments: int
    pending_payments: int
    on_time_rate: float
    late_rate: float
    missed_rate: float
    average_days_late: float
    total_amount: float
    commitment_level: str


# Reports


class ReportCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    report_type: ReportType = "custom"
    filters: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None


class ReportUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    report_type: Optional[ReportType] = None
    filters: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None


class ReportResponse(BaseModel):
    report_id: str
    title: str
    description: str
    report_type: ReportType
    filters: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None
    created_at: str


class ReportListResponse(BaseModel):
    reports: List[ReportResponse]
