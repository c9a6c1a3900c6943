"""Pytest fixtures for testing"""

import uuid
import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from moneymap.api.main import create_app
from moneymap.infrastructure.database.models import Base
from moneymap.infrastructure.database.session import get_db
from moneymap.domain.models import EPFContribution, Investment, InvestmentType, SIPPlan


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user_jayveer"


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
def user_id() -> str:
    return USER_ID


@pytest.fixture
def sip_plans() -> list[SIPPlan]:
    """Three funds, one of them superseded in February"""
    small_cap = uuid.uuid4()
    mid_cap_old = uuid.uuid4()
    mid_cap_new = uuid.uuid4()
    return [
        SIPPlan(
            id=small_cap,
            user_id=USER_ID,
            fund_name="Tata Small Cap Fund Direct Growth",
            amount_cents=500_000,
            start_date=date(2024, 1, 1),
        ),
        SIPPlan(
            id=mid_cap_old,
            user_id=USER_ID,
            fund_name="SBI Magnum Mid Cap Direct Plan",
            amount_cents=300_000,
            start_date=date(2023, 6, 1),
            end_date=date(2024, 2, 14),
        ),
        SIPPlan(
            id=mid_cap_new,
            user_id=USER_ID,
            fund_name="SBI Magnum Mid Cap Direct Plan",
            amount_cents=400_000,
            start_date=date(2024, 3, 1),
        ),
    ]


@pytest.fixture
def epf_history() -> list[EPFContribution]:
    """Contributions for January and February 2024"""
    return [
        EPFContribution(id=uuid.uuid4(), user_id=USER_ID, amount_cents=360_000, date=date(2024, 1, 5)),
        EPFContribution(id=uuid.uuid4(), user_id=USER_ID, amount_cents=360_000, date=date(2024, 2, 5)),
    ]


@pytest.fixture
def make_sip_investment():
    """Factory for SIP investments back-referencing a plan"""

    def _make(plan: SIPPlan, day: date, amount_cents: int | None = None, notes: str | None = None) -> Investment:
        return Investment(
            id=uuid.uuid4(),
            user_id=plan.user_id,
            type=InvestmentType.SIP,
            name=plan.fund_name,
            amount_cents=plan.amount_cents if amount_cents is None else amount_cents,
            date=day,
            sip_plan_id=plan.id,
            notes=notes,
        )

    return _make
