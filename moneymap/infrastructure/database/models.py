"""SQLAlchemy ORM models for the finance tables"""

import uuid
from sqlalchemy import (
    Column,
    String,
    BigInteger,
    DateTime,
    Date,
    ForeignKey,
    Text,
    UniqueConstraint,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Profile(Base):
    """User profile; holds the configured monthly EPF amount"""

    __tablename__ = "profiles"

    id = Column(Text, primary_key=True)  # auth user id
    full_name = Column(Text, nullable=True)
    epf_monthly_cents = Column(BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class EPFContributionRow(Base):
    """Provident fund contribution"""

    __tablename__ = "epf_contributions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SIPPlanRow(Base):
    """One version of a SIP; amount changes append a new row"""

    __tablename__ = "sip_investments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    fund_name = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class InvestmentRow(Base):
    """SIP-derived or manual investment"""

    __tablename__ = "investments"
    __table_args__ = (CheckConstraint("type IN ('SIP', 'MANUAL')", name="ck_investment_type"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    # Weak reference: deleting a plan leaves its investments in place
    sip_plan_id = Column(Uuid, ForeignKey("sip_investments.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(10), nullable=False)
    name = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SalaryRow(Base):
    __tablename__ = "salaries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpenseRow(Base):
    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    dr_cr = Column(String(2), nullable=False, default="DR")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BankAccountRow(Base):
    __tablename__ = "bank_accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    bank_name = Column(Text, nullable=False)
    account_type = Column(Text, nullable=False)
    balance_cents = Column(BigInteger, nullable=False)
    last_updated = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class RecurringClaim(Base):
    """
    One row per automatic or skipped monthly obligation.

    The unique constraint rejects a second claim for the same month, so two
    sessions racing past the existence check cannot both insert.
    """

    __tablename__ = "recurring_claims"
    __table_args__ = (
        UniqueConstraint("user_id", "obligation", "obligation_key", "period", name="uq_recurring_claim"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False)
    obligation = Column(String(10), nullable=False)  # EPF | SIP
    obligation_key = Column(Text, nullable=False)  # plan id for SIP, "epf" for EPF
    period = Column(Date, nullable=False)  # first day of the month
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
