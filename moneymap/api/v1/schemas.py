"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import List, Literal, Optional
import uuid

from moneymap.domain.models import ExpenseCategory, InvestmentType


class ReconcileRequest(BaseModel):
    """Request body for POST /v1/reconcile"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    today: Optional[date] = Field(None, description="Reference date (defaults to the server date)")
    last_reconciled_month: Optional[date] = Field(
        None, description="Month this session already reconciled; same month makes the pass a no-op"
    )


class SkipMonthRequest(BaseModel):
    """Request body for POST /v1/sip/skip"""

    user_id: str = Field(..., min_length=1)
    today: Optional[date] = None


class EPFContributionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[uuid.UUID] = None
    amount_cents: int
    date: date
    notes: Optional[str] = None


class InvestmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[uuid.UUID] = None
    sip_plan_id: Optional[uuid.UUID] = None
    type: InvestmentType
    name: str
    amount_cents: int
    date: date
    notes: Optional[str] = None


class ReconcileResponse(BaseModel):
    """Response for POST /v1/reconcile"""

    epf_added: bool
    investments_added: bool
    inserted_epf: List[EPFContributionSchema]
    inserted_investments: List[InvestmentSchema]
    last_reconciled_month: date


class SkipMonthResponse(BaseModel):
    skipped: List[InvestmentSchema]


class EPFCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    amount_cents: int = Field(..., gt=0)
    date: date
    notes: Optional[str] = None


class InvestmentCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    type: InvestmentType = InvestmentType.MANUAL
    name: str = Field(..., min_length=1)
    amount_cents: int = Field(..., ge=0)
    date: date
    sip_plan_id: Optional[uuid.UUID] = None
    notes: Optional[str] = None


class SIPPlanSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    fund_name: str
    amount_cents: int
    start_date: date
    end_date: Optional[date] = None


class SIPPlanCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    fund_name: str = Field(..., min_length=1)
    amount_cents: int = Field(..., gt=0)
    start_date: date


class SIPAmountChange(BaseModel):
    """Request body for POST /v1/sip/plans/{plan_id}/amount"""

    user_id: str = Field(..., min_length=1)
    amount_cents: int = Field(..., gt=0)
    today: Optional[date] = None


class SIPAmountChangeResponse(BaseModel):
    closed: SIPPlanSchema
    created: SIPPlanSchema


class SIPPlansResponse(BaseModel):
    plans: List[SIPPlanSchema]
    current: List[SIPPlanSchema]
    monthly_commitment_cents: int


class SalarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    amount_cents: int
    start_date: date
    end_date: Optional[date] = None


class SalaryCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    amount_cents: int = Field(..., gt=0)
    start_date: date
    end_date: Optional[date] = None


class ExpenseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: date
    amount_cents: int
    category: str
    description: Optional[str] = None
    dr_cr: str


class ExpenseCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    date: date
    amount_cents: int = Field(..., gt=0)
    category: ExpenseCategory
    description: Optional[str] = None
    dr_cr: Literal["DR", "CR"] = "DR"


class BankAccountSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    bank_name: str
    account_type: str
    balance_cents: int


class BankAccountCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    bank_name: str = Field(..., min_length=1)
    account_type: str = ""
    balance_cents: int


class BanksResponse(BaseModel):
    accounts: List[BankAccountSchema]
    total_balance_cents: int


class ProfileSchema(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    epf_monthly_cents: Optional[int] = None
    effective_epf_monthly_cents: int


class ProfileUpdate(BaseModel):
    user_id: str = Field(..., min_length=1)
    full_name: Optional[str] = None
    epf_monthly_cents: Optional[int] = Field(None, gt=0)


class CategoryTotalSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    amount_cents: int


class AllocationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    amount_cents: int
    percentage: float


class NetWorthPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: date
    amount_cents: int


class PeriodSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    period: str
    income_cents: int
    expenses_cents: int
    savings_cents: int
    savings_rate: float
    investments_cents: int
    epf_cents: int


class MetricChangeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    metric: str
    current: float
    previous: float
    change: float
    change_pct: Optional[float] = None


class OverviewResponse(BaseModel):
    """Response for GET /v1/reports/overview"""

    user_id: str
    total_assets_cents: int
    epf_cents: int
    investments_cents: int
    bank_cents: int
    monthly_change_cents: int
    monthly_income_cents: int
    monthly_expenses_cents: int
    monthly_savings_cents: int
    savings_rate: float
    monthly_sip_cents: int
    salary_earned_cents: int
    expenses_paid_cents: int
    lifetime_savings_rate: float
    expense_breakdown: List[CategoryTotalSchema]
    salary_allocation: List[AllocationSchema]
    net_worth_history: List[NetWorthPointSchema]


class MonthlyReportResponse(BaseModel):
    user_id: str
    range: str
    months: List[PeriodSummarySchema]


class YearlyReportResponse(BaseModel):
    user_id: str
    years: List[PeriodSummarySchema]
    year: Optional[str] = None
    comparison_year: Optional[str] = None
    comparison: List[MetricChangeSchema] = []
