"""Data access layer; every method takes the owning user_id explicitly"""

import uuid
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from credit_desk.infrastructure.database.models import Customer, PaymentRecord, CreditCalculation, Report
from credit_desk.domain.models import ApplicantProfile, CreditAssessment, CustomerRecord, Payment


def generate_customer_code() -> str:
    return f"C-{uuid.uuid4().hex[:8].upper()}"


def to_customer_record(customer: Customer) -> CustomerRecord:
    """Map a stored customer back to the canonical record"""
    return CustomerRecord(
        name=customer.name,
        phone=customer.phone,
        credit_score=customer.credit_score,
        payment_commitment=customer.payment_commitment,
        haggling_level=customer.haggling_level,
        purchase_willingness=customer.purchase_willingness,
        last_payment=customer.last_payment_date.isoformat() if customer.last_payment_date else "",
        total_debt=customer.total_debt,
        installment_amount=customer.installment_amount,
        status=customer.status,
        customer_code=customer.customer_code,
    )


def to_payment(record: PaymentRecord) -> Payment:
    return Payment(
        due_date=record.due_date,
        amount=record.amount,
        status=record.status,
        paid_date=record.paid_date,
        days_late=record.days_late or 0,
    )


def _customer_columns(record: CustomerRecord) -> Dict[str, Any]:
    return {
        "customer_code": record.customer_code or generate_customer_code(),
        "name": record.name,
        "phone": record.phone,
        "credit_score": record.credit_score,
        "payment_commitment": record.payment_commitment,
        "haggling_level": record.haggling_level,
        "purchase_willingness": record.purchase_willingness,
        "last_payment_date": date.fromisoformat(record.last_payment) if record.last_payment else None,
        "total_debt": record.total_debt,
        "installment_amount": record.installment_amount,
        "status": record.status,
    }


class CustomerRepository:
    """Repository for customers"""

    def __init__(self, db: Session):
        self.db = db

    def create_customer(self, user_id: str, record: CustomerRecord) -> Customer:
        """Persist a single customer; a code is generated when none is given"""
        db_customer = Customer(user_id=user_id, **_customer_columns(record))
        self.db.add(db_customer)
        self.db.flush()
        return db_customer

    def create_customers(self, user_id: str, records: List[CustomerRecord]) -> List[Customer]:
        """Bulk insert for imports"""
        db_customers = [Customer(user_id=user_id, **_customer_columns(r)) for r in records]
        self.db.add_all(db_customers)
        self.db.flush()
        return db_customers

    def list_customers(self, user_id: str, search: Optional[str] = None) -> List[Customer]:
        """Customers for a user, newest first, optionally filtered by name/phone/code"""
        query = self.db.query(Customer).filter(Customer.user_id == user_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.phone.ilike(pattern),
                    Customer.customer_code.ilike(pattern),
                )
            )
        return query.order_by(Customer.created_at.desc()).all()

    def get_customer(self, user_id: str, customer_id: uuid.UUID) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(Customer.id == customer_id, Customer.user_id == user_id)
            .first()
        )

    def update_customer(self, user_id: str, customer_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Customer]:
        """Apply column changes; returns None if the customer is not the user's"""
        db_customer = self.get_customer(user_id, customer_id)
        if not db_customer:
            return None
        for column, value in changes.items():
            setattr(db_customer, column, value)
        self.db.flush()
        return db_customer

    def delete_customer(self, user_id: str, customer_id: uuid.UUID) -> bool:
        db_customer = self.get_customer(user_id, customer_id)
        if not db_customer:
            return False
        self.db.delete(db_customer)
        self.db.flush()
        return True


class PaymentRepository:
    """Repository for payment records"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        user_id: str,
        customer_id: uuid.UUID,
        due_date: date,
        amount: float,
        status: str,
        paid_date: Optional[date] = None,
        days_late: int = 0,
        notes: Optional[str] = None,
    ) -> PaymentRecord:
        db_payment = PaymentRecord(
            user_id=user_id,
            customer_id=customer_id,
            due_date=due_date,
            paid_date=paid_date,
            amount=amount,
            status=status,
            days_late=days_late,
            notes=notes,
        )
        self.db.add(db_payment)
        self.db.flush()
        return db_payment

    def list_payments(self, user_id: str, customer_id: Optional[uuid.UUID] = None) -> List[PaymentRecord]:
        """Payments for a user (optionally one customer), latest due date first"""
        query = self.db.query(PaymentRecord).filter(PaymentRecord.user_id == user_id)
        if customer_id:
            query = query.filter(PaymentRecord.customer_id == customer_id)
        return query.order_by(PaymentRecord.due_date.desc()).all()

    def get_payment(self, user_id: str, payment_id: uuid.UUID) -> Optional[PaymentRecord]:
        return (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.id == payment_id, PaymentRecord.user_id == user_id)
            .first()
        )

    def update_payment(self, user_id: str, payment_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[PaymentRecord]:
        db_payment = self.get_payment(user_id, payment_id)
        if not db_payment:
            return None
        for column, value in changes.items():
            setattr(db_payment, column, value)
        self.db.flush()
        return db_payment

    def delete_payment(self, user_id: str, payment_id: uuid.UUID) -> bool:
        db_payment = self.get_payment(user_id, payment_id)
        if not db_payment:
            return False
        self.db.delete(db_payment)
        self.db.flush()
        return True


class CreditCalculationRepository:
    """Repository for saved credit calculations"""

    def __init__(self, db: Session):
        self.db = db

    def create_calculation(
        self,
        user_id: str,
        profile: ApplicantProfile,
        assessment: CreditAssessment,
        customer_id: Optional[uuid.UUID] = None,
    ) -> CreditCalculation:
        """Persist calculation inputs together with the assessment"""
        db_calculation = CreditCalculation(
            user_id=user_id,
            customer_id=customer_id,
            monthly_income=profile.monthly_income,
            current_debt=profile.current_debt,
            credit_score=profile.credit_score,
            payment_history=profile.payment_history_percent,
            years_with_store=profile.years_with_store,
            calculated_credit_limit=assessment.credit_limit,
            risk_level=assessment.risk_level,
            calculation_factors=[asdict(f) for f in assessment.factors],
        )
        self.db.add(db_calculation)
        self.db.flush()
        return db_calculation

    def list_calculations(self, user_id: str, limit: Optional[int] = None) -> List[CreditCalculation]:
        """Saved calculations for a user, newest first"""
        query = (
            self.db.query(CreditCalculation)
            .filter(CreditCalculation.user_id == user_id)
            .order_by(CreditCalculation.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()


class ReportRepository:
    """Repository for stored reports"""

    def __init__(self, db: Session):
        self.db = db

    def create_report(
        self,
        user_id: str,
        title: str,
        report_type: str,
        description: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Report:
        db_report = Report(
            user_id=user_id,
            title=title,
            description=description,
            report_type=report_type,
            filters=filters,
            data=data,
        )
        self.db.add(db_report)
        self.db.flush()
        return db_report

    def list_reports(self, user_id: str) -> List[Report]:
        return (
            self.db.query(Report)
            .filter(Report.user_id == user_id)
            .order_by(Report.created_at.desc())
            .all()
        )

    def get_report(self, user_id: str, report_id: uuid.UUID) -> Optional[Report]:
        return (
            self.db.query(Report)
            .filter(Report.id == report_id, Report.user_id == user_id)
            .first()
        )

    def update_report(self, user_id: str, report_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Report]:
        db_report = self.get_report(user_id, report_id)
        if not db_report:
            return None
        for column, value in changes.items():
            setattr(db_report, column, value)
        self.db.flush()
        return db_report

    def delete_report(self, user_id: str, report_id: uuid.UUID) -> bool:
        db_report = self.get_report(user_id, report_id)
        if not db_report:
            return False
        self.db.delete(db_report)
        self.db.flush()
        return True
