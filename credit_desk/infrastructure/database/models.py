"""SQLAlchemy ORM models; every table is scoped by the owning user_id"""

import uuid
from sqlalchemy import Column, String, BigInteger, Float, DateTime, Date, Integer, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
from credit_desk.domain.models import MAX_CUSTOMER_CODE_LENGTH

Base = declarative_base()


class Customer(Base):
    """Customer record with behavioural ratings and outstanding debt"""

    __tablename__ = "customer"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    customer_code = Column(String(MAX_CUSTOMER_CODE_LENGTH), nullable=False)
    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    credit_score = Column(Integer, nullable=False, default=650)
    payment_commitment = Column(Float, nullable=False, default=75)
    haggling_level = Column(Integer, nullable=False, default=5)
    purchase_willingness = Column(Integer, nullable=False, default=7)
    last_payment_date = Column(Date, nullable=True)
    total_debt = Column(Float, nullable=False, default=0)
    installment_amount = Column(Float, nullable=False, default=0)
    status = Column(Text, nullable=False, default="fair")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    payments = relationship("PaymentRecord", back_populates="customer", cascade="all, delete-orphan")


class PaymentRecord(Base):
    """Scheduled customer payment and its outcome"""

    __tablename__ = "payment_record"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customer.id", ondelete="CASCADE"), nullable=False)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date, nullable=True)
    amount = Column(Float, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    days_late = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="payments")


class CreditCalculation(Base):
    """Saved credit limit calculation with its inputs and factor breakdown"""

    __tablename__ = "credit_calculation"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customer.id", ondelete="SET NULL"), nullable=True)
    monthly_income = Column(Float, nullable=False)
    current_debt = Column(Float, nullable=False, default=0)
    credit_score = Column(Integer, nullable=False)
    payment_history = Column(Float, nullable=False)
    years_with_store = Column(Float, nullable=False, default=0)
    calculated_credit_limit = Column(BigInteger, nullable=False)
    risk_level = Column(Text, nullable=False)
    calculation_factors = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Report(Base):
    """Stored report snapshot"""

    __tablename__ = "report"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    report_type = Column(Text, nullable=False, default="custom")
    filters = Column(JSON, nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
