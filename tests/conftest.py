"""Pytest fixtures for testing"""

import os

# Point settings at SQLite before the application modules build their engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from credit_desk.api.main import create_app
from credit_desk.infrastructure.database.models import Base
from credit_desk.infrastructure.database.session import get_db
from credit_desk.domain.models import ApplicantProfile, CustomerRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def strong_applicant() -> ApplicantProfile:
    """Applicant that should land in the low risk tier"""
    return ApplicantProfile(
        monthly_income=15000,
        current_debt=3000,
        credit_score=750,
        payment_history_percent=95,
        years_with_store=2,
    )


@pytest.fixture
def sample_records() -> list[CustomerRecord]:
    """Canonical customers as produced by an import"""
    return [
        CustomerRecord(
            name="Ahmed Ali",
            phone="01012345678",
            credit_score=780,
            payment_commitment=92.5,
            haggling_level=3,
            purchase_willingness=9,
            last_payment="2024-01-15",
            total_debt=1200.5,
            installment_amount=300.0,
            status="excellent",
            customer_code="C-0001",
        ),
        CustomerRecord(
            name="Sara Hassan",
            phone="+20 111 222 3333",
            credit_score=640,
            payment_commitment=70.0,
            haggling_level=8,
            purchase_willingness=4,
            last_payment="",
            total_debt=0.0,
            installment_amount=0.0,
            status="fair",
            customer_code="C-0002",
        ),
    ]
