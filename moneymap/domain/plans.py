"""Append-only SIP plan versioning"""

from datetime import date
from typing import Dict, List, Tuple
from moneymap.domain.models import SIPPlan
from moneymap.domain.exceptions import PlanClosedError
from moneymap.utils.date_utils import add_months, month_start


def supersede_plan(plan: SIPPlan, new_amount_cents: int, today: date) -> Tuple[date, SIPPlan]:
    """
    Close `plan` today and describe its successor.

    The successor starts on the first day of next month so the current
    month keeps the old amount and the next month is covered by exactly
    one version.

    Returns:
        (end_date for the old plan, new plan version)
    """
    if plan.end_date is not None:
        raise PlanClosedError(f"SIP plan {plan.id} already ended on {plan.end_date.isoformat()}")

    successor = SIPPlan(
        user_id=plan.user_id,
        fund_name=plan.fund_name,
        amount_cents=new_amount_cents,
        start_date=add_months(month_start(today), 1),
        end_date=None,
    )
    return today, successor


def current_plans(plans: List[SIPPlan], today: date) -> List[SIPPlan]:
    """Latest active version per fund"""
    latest: Dict[str, SIPPlan] = {}
    for plan in plans:
        if not plan.is_active_in(today):
            continue
        existing = latest.get(plan.fund_name)
        if existing is None or plan.start_date > existing.start_date:
            latest[plan.fund_name] = plan
    return sorted(latest.values(), key=lambda p: p.fund_name)


def monthly_commitment_cents(plans: List[SIPPlan], today: date) -> int:
    return sum(plan.amount_cents for plan in current_plans(plans, today))
