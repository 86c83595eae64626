"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

RISK_LEVELS = ("low", "medium", "high")
CUSTOMER_STATUSES = ("excellent", "good", "fair", "poor")
PAYMENT_STATUSES = ("paid", "late", "pending", "missed")
REPORT_TYPES = ("customer_analysis", "payment_analysis", "credit_analysis", "custom")
MAX_CUSTOMER_CODE_LENGTH = 32


@dataclass
class ApplicantProfile:
    """Financial inputs for a credit limit calculation"""

    monthly_income: float
    current_debt: float
    credit_score: int  # 300-850
    payment_history_percent: float  # 0-100
    years_with_store: float


@dataclass
class CreditFactor:
    """One dimension of the credit assessment breakdown"""

    name: str
    impact_percent: float  # 0-100, display only
    description: str


@dataclass
class CreditAssessment:
    """Output of the credit scoring engine"""

    credit_limit: int
    risk_level: str  # "low" | "medium" | "high"
    debt_ratio: float
    factors: List[CreditFactor]


@dataclass
class CustomerRecord:
    """Canonical customer produced by the import normalizer"""

    name: str
    phone: str
    credit_score: int
    payment_commitment: float
    haggling_level: int
    purchase_willingness: int
    last_payment: str  # ISO date or ""
    total_debt: float
    installment_amount: float
    status: str  # "excellent" | "good" | "fair" | "poor"
    customer_code: str = ""


@dataclass
class ImportResult:
    """Normalized records plus per-row error messages, both in input order"""

    records: List[CustomerRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class Payment:
    """Single scheduled payment used for payment analysis"""

    due_date: date
    amount: float
    status: str  # "paid" | "late" | "pending" | "missed"
    paid_date: Optional[date] = None
    days_late: int = 0


@dataclass
class PaymentSummary:
    """Aggregated payment behaviour metrics"""

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
