"""GET /v1/reports/* - dashboard overview, monthly and yearly reports"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from moneymap.api.v1.schemas import (
    AllocationSchema,
    CategoryTotalSchema,
    MetricChangeSchema,
    MonthlyReportResponse,
    NetWorthPointSchema,
    OverviewResponse,
    PeriodSummarySchema,
    YearlyReportResponse,
)
from moneymap.config import settings
from moneymap.domain import summaries
from moneymap.domain.plans import monthly_commitment_cents
from moneymap.infrastructure.database.session import get_db
from moneymap.infrastructure.database.repositories import (
    BankAccountRepository,
    EPFRepository,
    ExpenseRepository,
    InvestmentRepository,
    SalaryRepository,
    SIPPlanRepository,
    bank_to_domain,
    epf_to_domain,
    expense_to_domain,
    investment_to_domain,
    plan_to_domain,
    salary_to_domain,
)

router = APIRouter()


class _UserData:
    """All of a user's rows converted to domain objects"""

    def __init__(self, db: Session, user_id: str):
        self.contributions = [epf_to_domain(r) for r in EPFRepository(db).list_by_user(user_id)]
        self.investments = [investment_to_domain(r) for r in InvestmentRepository(db).list_by_user(user_id)]
        self.expenses = [expense_to_domain(r) for r in ExpenseRepository(db).list_by_user(user_id)]
        self.salaries = [salary_to_domain(r) for r in SalaryRepository(db).list_by_user(user_id)]
        self.accounts = [bank_to_domain(r) for r in BankAccountRepository(db).list_by_user(user_id)]
        self.plans = [plan_to_domain(r) for r in SIPPlanRepository(db).list_by_user(user_id)]


@router.get("/reports/overview", response_model=OverviewResponse)
def overview(
    user_id: str = Query(..., description="User identifier"),
    today: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """Assets, this month's savings, spending breakdown and net worth history"""
    today = today or date.today()
    data = _UserData(db, user_id)

    assets = summaries.total_assets(data.contributions, data.investments, data.accounts, today)
    income = summaries.salary_for_month(data.salaries, today)
    spending = summaries.spending_for_month(data.expenses, today)
    lifetime = summaries.lifetime_totals(data.salaries, data.expenses, today)
    history = summaries.net_worth_history(
        data.contributions, data.investments, today, settings.net_worth_history_months
    )

    return OverviewResponse(
        user_id=user_id,
        total_assets_cents=assets.total_cents,
        epf_cents=assets.epf_cents,
        investments_cents=assets.investments_cents,
        bank_cents=assets.bank_cents,
        monthly_change_cents=assets.monthly_change_cents,
        monthly_income_cents=income,
        monthly_expenses_cents=spending,
        monthly_savings_cents=income - spending,
        savings_rate=summaries.savings_rate(income, spending),
        monthly_sip_cents=monthly_commitment_cents(data.plans, today),
        salary_earned_cents=lifetime.salary_earned_cents,
        expenses_paid_cents=lifetime.expenses_paid_cents,
        lifetime_savings_rate=lifetime.lifetime_savings_rate,
        expense_breakdown=[
            CategoryTotalSchema.model_validate(c) for c in summaries.category_breakdown(data.expenses, today)
        ],
        salary_allocation=[
            AllocationSchema.model_validate(s) for s in summaries.salary_allocation(income, data.expenses, today)
        ],
        net_worth_history=[NetWorthPointSchema.model_validate(p) for p in history],
    )


@router.get("/reports/monthly", response_model=MonthlyReportResponse)
def monthly(
    user_id: str = Query(...),
    range_name: str = Query("1year", alias="range", description="3months | 6months | ytd | 1year | 2years"),
    today: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    today = today or date.today()
    start = summaries.report_start(range_name, today)
    data = _UserData(db, user_id)

    rows = summaries.monthly_report(
        data.salaries, data.expenses, data.investments, data.contributions, start, today
    )
    return MonthlyReportResponse(
        user_id=user_id,
        range=range_name,
        months=[PeriodSummarySchema.model_validate(r) for r in rows],
    )


@router.get("/reports/yearly", response_model=YearlyReportResponse)
def yearly(
    user_id: str = Query(...),
    year: Optional[int] = Query(None, description="Year to compare (defaults to the current year)"),
    comparison_year: Optional[int] = Query(None, description="Baseline year (defaults to the year before)"),
    today: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """Per-year totals plus a year-over-year comparison"""
    today = today or date.today()
    year = year or today.year
    comparison_year = comparison_year or year - 1
    data = _UserData(db, user_id)

    rows = summaries.yearly_report(data.salaries, data.expenses, data.investments, data.contributions, today)
    comparison = summaries.year_over_year(rows, str(year), str(comparison_year))

    return YearlyReportResponse(
        user_id=user_id,
        years=[PeriodSummarySchema.model_validate(r) for r in rows],
        year=comparison.year,
        comparison_year=comparison.comparison_year,
        comparison=[MetricChangeSchema.model_validate(c) for c in comparison.changes],
    )
