"""Data access layer for finance entities"""

import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from moneymap.infrastructure.database.models import (
    BankAccountRow,
    EPFContributionRow,
    ExpenseRow,
    InvestmentRow,
    Profile,
    RecurringClaim,
    SalaryRow,
    SIPPlanRow,
)
from moneymap.domain.models import (
    BankAccount,
    EPFContribution,
    Expense,
    Investment,
    InvestmentType,
    Obligation,
    Salary,
    SIPPlan,
)
from moneymap.domain.exceptions import PlanNotFoundError, RecordNotFoundError


def epf_to_domain(row: EPFContributionRow) -> EPFContribution:
    return EPFContribution(
        id=row.id,
        user_id=row.user_id,
        amount_cents=row.amount_cents,
        date=row.date,
        notes=row.notes,
    )


def plan_to_domain(row: SIPPlanRow) -> SIPPlan:
    return SIPPlan(
        id=row.id,
        user_id=row.user_id,
        fund_name=row.fund_name,
        amount_cents=row.amount_cents,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def investment_to_domain(row: InvestmentRow) -> Investment:
    return Investment(
        id=row.id,
        user_id=row.user_id,
        sip_plan_id=row.sip_plan_id,
        type=InvestmentType(row.type),
        name=row.name,
        amount_cents=row.amount_cents,
        date=row.date,
        notes=row.notes,
    )


def salary_to_domain(row: SalaryRow) -> Salary:
    return Salary(
        id=row.id,
        user_id=row.user_id,
        amount_cents=row.amount_cents,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def expense_to_domain(row: ExpenseRow) -> Expense:
    return Expense(
        id=row.id,
        user_id=row.user_id,
        date=row.date,
        amount_cents=row.amount_cents,
        category=row.category,
        description=row.description,
        dr_cr=row.dr_cr,
    )


def bank_to_domain(row: BankAccountRow) -> BankAccount:
    return BankAccount(
        id=row.id,
        user_id=row.user_id,
        bank_name=row.bank_name,
        account_type=row.account_type,
        balance_cents=row.balance_cents,
    )


class ProfileRepository:
    """Repository for user profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[Profile]:
        return self.db.get(Profile, user_id)

    def upsert(self, user_id: str, full_name: Optional[str], epf_monthly_cents: Optional[int]) -> Profile:
        """Create the profile or overwrite its editable fields"""
        profile = self.get(user_id)
        if profile is None:
            profile = Profile(id=user_id)
            self.db.add(profile)
        profile.full_name = full_name
        profile.epf_monthly_cents = epf_monthly_cents
        self.db.flush()
        return profile

    def get_epf_monthly_cents(self, user_id: str) -> Optional[int]:
        profile = self.get(user_id)
        return profile.epf_monthly_cents if profile else None


class EPFRepository:
    """Repository for EPF contributions"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str) -> List[EPFContributionRow]:
        return (
            self.db.query(EPFContributionRow)
            .filter(EPFContributionRow.user_id == user_id)
            .order_by(EPFContributionRow.date.desc())
            .all()
        )

    def create(self, contribution: EPFContribution) -> EPFContributionRow:
        row = EPFContributionRow(
            user_id=contribution.user_id,
            amount_cents=contribution.amount_cents,
            date=contribution.date,
            notes=contribution.notes,
        )
        self.db.add(row)
        self.db.flush()  # Get ID without committing
        return row


class InvestmentRepository:
    """Repository for investments"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str) -> List[InvestmentRow]:
        return (
            self.db.query(InvestmentRow)
            .filter(InvestmentRow.user_id == user_id)
            .order_by(InvestmentRow.date.desc())
            .all()
        )

    def create(self, investment: Investment) -> InvestmentRow:
        row = InvestmentRow(
            user_id=investment.user_id,
            sip_plan_id=investment.sip_plan_id,
            type=investment.type.value,
            name=investment.name,
            amount_cents=investment.amount_cents,
            date=investment.date,
            notes=investment.notes,
        )
        self.db.add(row)
        self.db.flush()
        return row


class SIPPlanRepository:
    """Repository for versioned SIP plans"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str) -> List[SIPPlanRow]:
        return (
            self.db.query(SIPPlanRow)
            .filter(SIPPlanRow.user_id == user_id)
            .order_by(SIPPlanRow.start_date.asc(), SIPPlanRow.created_at.asc())
            .all()
        )

    def get(self, user_id: str, plan_id: uuid.UUID) -> SIPPlanRow:
        row = (
            self.db.query(SIPPlanRow)
            .filter(SIPPlanRow.id == plan_id, SIPPlanRow.user_id == user_id)
            .first()
        )
        if row is None:
            raise PlanNotFoundError(f"SIP plan {plan_id} not found")
        return row

    def create(self, plan: SIPPlan) -> SIPPlanRow:
        row = SIPPlanRow(
            user_id=plan.user_id,
            fund_name=plan.fund_name,
            amount_cents=plan.amount_cents,
            start_date=plan.start_date,
            end_date=plan.end_date,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def close(self, row: SIPPlanRow, end_date: date) -> SIPPlanRow:
        row.end_date = end_date
        self.db.flush()
        return row


class SalaryRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str) -> List[SalaryRow]:
        return (
            self.db.query(SalaryRow)
            .filter(SalaryRow.user_id == user_id)
            .order_by(SalaryRow.start_date.asc())
            .all()
        )

    def create(self, salary: Salary) -> SalaryRow:
        row = SalaryRow(
            user_id=salary.user_id,
            amount_cents=salary.amount_cents,
            start_date=salary.start_date,
            end_date=salary.end_date,
        )
        self.db.add(row)
        self.db.flush()
        return row


class ExpenseRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str, since: Optional[date] = None) -> List[ExpenseRow]:
        query = self.db.query(ExpenseRow).filter(ExpenseRow.user_id == user_id)
        if since is not None:
            query = query.filter(ExpenseRow.date >= since)
        return query.order_by(ExpenseRow.date.desc()).all()

    def create(self, expense: Expense) -> ExpenseRow:
        row = ExpenseRow(
            user_id=expense.user_id,
            date=expense.date,
            amount_cents=expense.amount_cents,
            category=expense.category,
            description=expense.description,
            dr_cr=expense.dr_cr,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def delete(self, user_id: str, expense_id: uuid.UUID) -> None:
        deleted = (
            self.db.query(ExpenseRow)
            .filter(ExpenseRow.id == expense_id, ExpenseRow.user_id == user_id)
            .delete()
        )
        if not deleted:
            raise RecordNotFoundError(f"Expense {expense_id} not found")


class BankAccountRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str) -> List[BankAccountRow]:
        return (
            self.db.query(BankAccountRow)
            .filter(BankAccountRow.user_id == user_id)
            .order_by(BankAccountRow.bank_name.asc())
            .all()
        )

    def get(self, user_id: str, account_id: uuid.UUID) -> BankAccountRow:
        row = (
            self.db.query(BankAccountRow)
            .filter(BankAccountRow.id == account_id, BankAccountRow.user_id == user_id)
            .first()
        )
        if row is None:
            raise RecordNotFoundError(f"Bank account {account_id} not found")
        return row

    def create(self, account: BankAccount) -> BankAccountRow:
        row = BankAccountRow(
            user_id=account.user_id,
            bank_name=account.bank_name,
            account_type=account.account_type,
            balance_cents=account.balance_cents,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def update(self, row: BankAccountRow, bank_name: str, account_type: str, balance_cents: int) -> BankAccountRow:
        row.bank_name = bank_name
        row.account_type = account_type
        row.balance_cents = balance_cents
        self.db.flush()
        return row

    def delete(self, row: BankAccountRow) -> None:
        self.db.delete(row)
        self.db.flush()


class ClaimRepository:
    """Unique per-month claims backing automatic and skip inserts"""

    def __init__(self, db: Session):
        self.db = db

    def claim(self, user_id: str, obligation: Obligation, obligation_key: str, period: date) -> RecurringClaim:
        """
        Record the month as taken.

        Raises:
            sqlalchemy.exc.IntegrityError: another pass already claimed it
        """
        row = RecurringClaim(
            user_id=user_id,
            obligation=obligation.value,
            obligation_key=obligation_key,
            period=period,
        )
        self.db.add(row)
        self.db.flush()
        return row
