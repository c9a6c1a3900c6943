"""Recurring contribution reconciliation - decides which monthly entries are missing"""

from datetime import date
from typing import Iterable, List, Optional
from moneymap.domain.models import (
    AUTO_EPF_NOTE,
    AUTO_SIP_NOTE,
    SKIP_NOTE,
    EPFContribution,
    Investment,
    InvestmentType,
    ObligationState,
    ReconciliationPlan,
    SIPPlan,
)
from moneymap.utils.date_utils import day_in_month, month_start, same_month

DEFAULT_EPF_TRIGGER_DAY = 5
DEFAULT_SIP_TRIGGER_DAY = 25


def obligation_state(today: date, trigger_day: int, has_entry: bool) -> ObligationState:
    """
    Month-local state of one recurring obligation.

    An entry recorded before the trigger day (e.g. a skip marker) satisfies
    the obligation immediately.
    """
    if has_entry:
        return ObligationState.SATISFIED
    if today.day >= trigger_day:
        return ObligationState.DUE
    return ObligationState.PENDING


def has_epf_for_month(contributions: Iterable[EPFContribution], month: date) -> bool:
    return any(same_month(c.date, month) for c in contributions)


def has_sip_entry_for_month(investments: Iterable[Investment], plan: SIPPlan, month: date) -> bool:
    """Any investment (skip markers included) back-referencing the plan in this month"""
    return any(
        inv.sip_plan_id is not None and inv.sip_plan_id == plan.id and same_month(inv.date, month)
        for inv in investments
    )


def active_plans(plans: Iterable[SIPPlan], month: date) -> List[SIPPlan]:
    return [plan for plan in plans if plan.is_active_in(month)]


def plan_epf_contribution(
    user_id: str,
    today: date,
    contributions: List[EPFContribution],
    monthly_amount_cents: int,
    trigger_day: int = DEFAULT_EPF_TRIGGER_DAY,
) -> Optional[EPFContribution]:
    """Return the EPF contribution to insert for today's month, or None"""
    state = obligation_state(today, trigger_day, has_epf_for_month(contributions, today))
    if state != ObligationState.DUE:
        return None

    return EPFContribution(
        user_id=user_id,
        amount_cents=monthly_amount_cents,
        date=day_in_month(today, trigger_day),
        notes=AUTO_EPF_NOTE,
    )


def plan_sip_investments(
    user_id: str,
    today: date,
    plans: List[SIPPlan],
    investments: List[Investment],
    trigger_day: int = DEFAULT_SIP_TRIGGER_DAY,
) -> List[Investment]:
    """Return one SIP investment per active plan whose month is still DUE"""
    month = month_start(today)
    planned = []

    for plan in active_plans(plans, month):
        state = obligation_state(today, trigger_day, has_sip_entry_for_month(investments, plan, month))
        if state != ObligationState.DUE:
            continue

        planned.append(
            Investment(
                user_id=user_id,
                type=InvestmentType.SIP,
                name=plan.fund_name,
                amount_cents=plan.amount_cents,
                date=day_in_month(month, trigger_day),
                sip_plan_id=plan.id,
                notes=AUTO_SIP_NOTE,
            )
        )

    return planned


def plan_skip_markers(
    user_id: str,
    today: date,
    plans: List[SIPPlan],
    investments: List[Investment],
) -> List[Investment]:
    """
    Zero-amount markers for every active plan without an entry this month.

    Plans already satisfied (real entry or earlier skip) get nothing, so
    repeating the action is harmless.
    """
    month = month_start(today)
    return [
        Investment(
            user_id=user_id,
            type=InvestmentType.SIP,
            name=plan.fund_name,
            amount_cents=0,
            date=today,
            sip_plan_id=plan.id,
            notes=SKIP_NOTE,
        )
        for plan in active_plans(plans, month)
        if not has_sip_entry_for_month(investments, plan, month)
    ]


def plan_reconciliation(
    user_id: str,
    today: date,
    contributions: List[EPFContribution],
    plans: List[SIPPlan],
    investments: List[Investment],
    epf_monthly_cents: int,
    last_reconciled_month: Optional[date] = None,
    epf_trigger_day: int = DEFAULT_EPF_TRIGGER_DAY,
    sip_trigger_day: int = DEFAULT_SIP_TRIGGER_DAY,
) -> ReconciliationPlan:
    """
    Main entry point: decide every insert for today's month.

    Pure function of (today, existing rows, session marker). When the
    session already reconciled this month nothing is planned.
    """
    month = month_start(today)

    if last_reconciled_month is not None and same_month(last_reconciled_month, month):
        return ReconciliationPlan(month=month, skipped_by_guard=True)

    return ReconciliationPlan(
        month=month,
        epf=plan_epf_contribution(user_id, today, contributions, epf_monthly_cents, epf_trigger_day),
        investments=plan_sip_investments(user_id, today, plans, investments, sip_trigger_day),
    )
