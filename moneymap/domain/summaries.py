"""Dashboard aggregations - net worth, savings rate, category and period reports"""

from datetime import date
from typing import Dict, List, Optional
from moneymap.domain.models import (
    AllocationSlice,
    AssetTotals,
    BankAccount,
    CategoryTotal,
    EPFContribution,
    Expense,
    Investment,
    LifetimeTotals,
    MetricChange,
    NetWorthPoint,
    PeriodSummary,
    Salary,
    YearComparison,
)
from moneymap.domain.exceptions import InvalidRangeError
from moneymap.utils.date_utils import add_months, month_end, month_range, month_start, same_month

REPORT_RANGES = {
    "3months": 3,
    "6months": 6,
    "1year": 12,
    "2years": 24,
}


def _month_key(day: date) -> tuple[int, int]:
    return (day.year, day.month)


def total_assets(
    contributions: List[EPFContribution],
    investments: List[Investment],
    accounts: List[BankAccount],
    today: date,
) -> AssetTotals:
    """Current assets; monthly change is this month's EPF and investment inflow"""
    epf_total = sum(c.amount_cents for c in contributions)
    investment_total = sum(i.amount_cents for i in investments)
    bank_total = sum(a.balance_cents for a in accounts)

    monthly_change = sum(c.amount_cents for c in contributions if same_month(c.date, today)) + sum(
        i.amount_cents for i in investments if same_month(i.date, today)
    )

    return AssetTotals(
        epf_cents=epf_total,
        investments_cents=investment_total,
        bank_cents=bank_total,
        total_cents=epf_total + investment_total + bank_total,
        monthly_change_cents=monthly_change,
    )


def salary_for_month(salaries: List[Salary], month: date) -> int:
    """Amount of the latest salary version covering `month`, else 0"""
    key = _month_key(month)
    covering = [
        s for s in salaries
        if _month_key(s.start_date) <= key and (s.end_date is None or _month_key(s.end_date) >= key)
    ]
    if not covering:
        return 0
    return max(covering, key=lambda s: s.start_date).amount_cents


def spending_for_month(expenses: List[Expense], month: date) -> int:
    return sum(e.amount_cents for e in expenses if e.is_spending and same_month(e.date, month))


def savings_rate(income_cents: int, expenses_cents: int) -> float:
    """Percentage of income left after spending; 0 without income"""
    if income_cents <= 0:
        return 0.0
    return round((income_cents - expenses_cents) / income_cents * 100, 2)


def category_breakdown(expenses: List[Expense], month: date) -> List[CategoryTotal]:
    """DR spending per category for one month, largest first"""
    totals: Dict[str, int] = {}
    for expense in expenses:
        if expense.is_spending and same_month(expense.date, month):
            totals[expense.category] = totals.get(expense.category, 0) + expense.amount_cents

    return [
        CategoryTotal(category=category, amount_cents=amount)
        for category, amount in sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    ]


def salary_allocation(salary_cents: int, expenses: List[Expense], month: date) -> List[AllocationSlice]:
    """
    Split a month's salary into category spending plus a Savings bucket.

    Returns an empty list when there is no salary to allocate.
    """
    if salary_cents <= 0:
        return []

    categories = category_breakdown(expenses, month)
    spent = sum(c.amount_cents for c in categories)
    slices = [
        AllocationSlice(
            category=c.category,
            amount_cents=c.amount_cents,
            percentage=round(c.amount_cents / salary_cents * 100, 2),
        )
        for c in categories
    ]

    savings = max(0, salary_cents - spent)
    slices.append(
        AllocationSlice(category="Savings", amount_cents=savings, percentage=round(savings / salary_cents * 100, 2))
    )
    return sorted(slices, key=lambda s: s.amount_cents, reverse=True)


def net_worth_history(
    contributions: List[EPFContribution],
    investments: List[Investment],
    today: date,
    months: int = 12,
) -> List[NetWorthPoint]:
    """Cumulative EPF plus investments at the end of each of the last `months` months"""
    history = []
    for offset in range(months - 1, -1, -1):
        month = add_months(month_start(today), -offset)
        cutoff = month_end(month)
        amount = sum(c.amount_cents for c in contributions if c.date <= cutoff) + sum(
            i.amount_cents for i in investments if i.date <= cutoff
        )
        history.append(NetWorthPoint(month=month, amount_cents=amount))
    return history


def _summarize(
    period: str,
    income: int,
    expenses: int,
    investments: int,
    epf: int,
) -> PeriodSummary:
    return PeriodSummary(
        period=period,
        income_cents=income,
        expenses_cents=expenses,
        savings_cents=income - expenses,
        savings_rate=savings_rate(income, expenses),
        investments_cents=investments,
        epf_cents=epf,
    )


def report_start(range_name: str, today: date) -> date:
    """First month covered by a named report range"""
    if range_name == "ytd":
        return date(today.year, 1, 1)
    if range_name not in REPORT_RANGES:
        raise InvalidRangeError(f"Unknown report range: {range_name}")
    return month_start(add_months(today, -REPORT_RANGES[range_name]))


def monthly_report(
    salaries: List[Salary],
    expenses: List[Expense],
    investments: List[Investment],
    contributions: List[EPFContribution],
    start: date,
    today: date,
) -> List[PeriodSummary]:
    if start > today:
        raise InvalidRangeError("Report start is after the reference date")

    rows = []
    for month in month_range(start, today):
        rows.append(
            _summarize(
                period=month.strftime("%Y-%m"),
                income=salary_for_month(salaries, month),
                expenses=spending_for_month(expenses, month),
                investments=sum(i.amount_cents for i in investments if same_month(i.date, month)),
                epf=sum(c.amount_cents for c in contributions if same_month(c.date, month)),
            )
        )
    return rows


def salary_for_year(salaries: List[Salary], year: int, today: date) -> int:
    """Sum of monthly salary across the year, stopping at today's month"""
    last = date(year, 12, 1) if year < today.year else month_start(today)
    if last.year != year:
        return 0
    return sum(salary_for_month(salaries, month) for month in month_range(date(year, 1, 1), last))


def yearly_report(
    salaries: List[Salary],
    expenses: List[Expense],
    investments: List[Investment],
    contributions: List[EPFContribution],
    today: date,
) -> List[PeriodSummary]:
    """One row per calendar year present in expenses, investments or EPF"""
    years = sorted(
        {e.date.year for e in expenses}
        | {i.date.year for i in investments}
        | {c.date.year for c in contributions}
    )

    return [
        _summarize(
            period=str(year),
            income=salary_for_year(salaries, year, today),
            expenses=sum(e.amount_cents for e in expenses if e.is_spending and e.date.year == year),
            investments=sum(i.amount_cents for i in investments if i.date.year == year),
            epf=sum(c.amount_cents for c in contributions if c.date.year == year),
        )
        for year in years
    ]


def _change(metric: str, current: float, previous: float) -> MetricChange:
    change_pct: Optional[float] = None
    if previous:
        change_pct = round((current - previous) / abs(previous) * 100, 2)
    return MetricChange(
        metric=metric,
        current=current,
        previous=previous,
        change=round(current - previous, 2),
        change_pct=change_pct,
    )


def year_over_year(yearly: List[PeriodSummary], year: str, comparison_year: str) -> YearComparison:
    """Compare two rows of a yearly report; a missing year counts as zeros"""
    by_year = {row.period: row for row in yearly}
    current = by_year.get(year)
    previous = by_year.get(comparison_year)
    empty = _summarize(period="", income=0, expenses=0, investments=0, epf=0)
    cur = current or empty
    prev = previous or empty

    changes = [
        _change("income", cur.income_cents, prev.income_cents),
        _change("expenses", cur.expenses_cents, prev.expenses_cents),
        _change("savings", cur.savings_cents, prev.savings_cents),
        _change("savings_rate", cur.savings_rate, prev.savings_rate),
        _change("investments", cur.investments_cents, prev.investments_cents),
        _change("epf", cur.epf_cents, prev.epf_cents),
    ]

    return YearComparison(
        year=year,
        comparison_year=comparison_year,
        current=current,
        previous=previous,
        changes=changes,
    )


def lifetime_totals(salaries: List[Salary], expenses: List[Expense], today: date) -> LifetimeTotals:
    """Salary earned since the first salary version and all DR spending"""
    earned = 0
    if salaries:
        first = min(s.start_date for s in salaries)
        earned = sum(salary_for_month(salaries, month) for month in month_range(first, today))

    paid = sum(e.amount_cents for e in expenses if e.is_spending)
    return LifetimeTotals(
        salary_earned_cents=earned,
        expenses_paid_cents=paid,
        lifetime_savings_rate=savings_rate(earned, paid),
    )
