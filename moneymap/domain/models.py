"""Domain models - pure Python dataclasses representing business entities"""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from moneymap.utils.date_utils import month_start

SKIP_NOTE = "skipped"
AUTO_EPF_NOTE = "Automatically added monthly EPF contribution"
AUTO_SIP_NOTE = "Automatically added monthly SIP investment"


class InvestmentType(str, enum.Enum):
    SIP = "SIP"
    MANUAL = "MANUAL"


class Obligation(str, enum.Enum):
    """Recurring monthly obligation tracked by the reconciler"""

    EPF = "EPF"
    SIP = "SIP"


class ObligationState(str, enum.Enum):
    PENDING = "PENDING"  # before trigger day, nothing recorded
    DUE = "DUE"  # on/after trigger day, nothing recorded
    SATISFIED = "SATISFIED"  # entry or skip marker present


class ExpenseCategory(str, enum.Enum):
    ENTERTAINMENT = "ENTERTAINMENT"
    CREDIT = "CREDIT"
    OTHER = "OTHER"
    GROCERIES = "GROCERIES"
    SALARY = "SALARY"
    TRAVEL = "TRAVEL"
    SHOPPING = "SHOPPING"
    BILLS = "BILLS"
    HEALTH = "HEALTH"
    INVESTMENT = "INVESTMENT"
    TRANSFER = "TRANSFER"
    FUEL = "FUEL"
    BANK_DEPOSIT = "BANK_DEPOSIT"
    REFUND = "REFUND"
    UNKNOWN = "UNKNOWN"
    GYM = "GYM"


@dataclass
class EPFContribution:
    """Monthly provident fund contribution"""

    user_id: str
    amount_cents: int
    date: date
    notes: Optional[str] = None
    id: Optional[uuid.UUID] = None


@dataclass
class SIPPlan:
    """One version of a systematic investment plan (end_date None = open-ended)"""

    user_id: str
    fund_name: str
    amount_cents: int
    start_date: date
    end_date: Optional[date] = None
    id: Optional[uuid.UUID] = None

    def is_active_in(self, month: date) -> bool:
        """
        Active in the month containing `month`.

        Started on or before the first of the month and not ended before it,
        so a plan starting mid-month is first invested the following month.
        """
        first = month_start(month)
        if self.start_date > first:
            return False
        if self.end_date is not None and self.end_date < first:
            return False
        return True


@dataclass
class Investment:
    """SIP-derived or manual investment entry"""

    user_id: str
    type: InvestmentType
    name: str
    amount_cents: int
    date: date
    sip_plan_id: Optional[uuid.UUID] = None
    notes: Optional[str] = None
    id: Optional[uuid.UUID] = None

    @property
    def is_skip_marker(self) -> bool:
        return self.amount_cents == 0 and self.notes == SKIP_NOTE


@dataclass
class Salary:
    """Monthly salary version effective between start_date and end_date"""

    user_id: str
    amount_cents: int
    start_date: date
    end_date: Optional[date] = None
    id: Optional[uuid.UUID] = None


@dataclass
class Expense:
    user_id: str
    date: date
    amount_cents: int
    category: str
    description: Optional[str] = None
    dr_cr: str = "DR"
    id: Optional[uuid.UUID] = None

    @property
    def is_spending(self) -> bool:
        return self.dr_cr == "DR"


@dataclass
class BankAccount:
    user_id: str
    bank_name: str
    account_type: str
    balance_cents: int
    id: Optional[uuid.UUID] = None


@dataclass
class ReconciliationPlan:
    """Rows the reconciler decided to insert for one pass"""

    month: date
    epf: Optional[EPFContribution] = None
    investments: List[Investment] = field(default_factory=list)
    skipped_by_guard: bool = False

    @property
    def is_empty(self) -> bool:
        return self.epf is None and not self.investments


@dataclass
class ReconciliationResult:
    """Rows actually inserted by a reconciliation pass"""

    month: date
    inserted_epf: List[EPFContribution] = field(default_factory=list)
    inserted_investments: List[Investment] = field(default_factory=list)
    failures: int = 0
    skipped_by_guard: bool = False

    @property
    def epf_added(self) -> bool:
        return bool(self.inserted_epf)

    @property
    def investments_added(self) -> bool:
        return bool(self.inserted_investments)


@dataclass
class AssetTotals:
    """Current asset position"""

    epf_cents: int
    investments_cents: int
    bank_cents: int
    total_cents: int
    monthly_change_cents: int


@dataclass
class CategoryTotal:
    category: str
    amount_cents: int


@dataclass
class AllocationSlice:
    """Share of monthly salary taken by one category (or savings)"""

    category: str
    amount_cents: int
    percentage: float


@dataclass
class NetWorthPoint:
    month: date
    amount_cents: int


@dataclass
class PeriodSummary:
    """Income, spending and contributions for one month or year"""

    period: str  # "2024-03" for months, "2024" for years
    income_cents: int
    expenses_cents: int
    savings_cents: int
    savings_rate: float
    investments_cents: int
    epf_cents: int


@dataclass
class MetricChange:
    metric: str
    current: float
    previous: float
    change: float
    change_pct: Optional[float]


@dataclass
class YearComparison:
    year: str
    comparison_year: str
    current: Optional[PeriodSummary]
    previous: Optional[PeriodSummary]
    changes: List[MetricChange] = field(default_factory=list)


@dataclass
class LifetimeTotals:
    salary_earned_cents: int
    expenses_paid_cents: int
    lifetime_savings_rate: float
