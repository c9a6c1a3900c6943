"""SIP plans: listing, creation, amount changes and month skips"""

import logging
import uuid
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from moneymap.api.v1.schemas import (
    InvestmentSchema,
    SIPAmountChange,
    SIPAmountChangeResponse,
    SIPPlanCreate,
    SIPPlanSchema,
    SIPPlansResponse,
    SkipMonthRequest,
    SkipMonthResponse,
)
from moneymap.api.dependencies import get_reconciliation_service, get_request_id
from moneymap.domain.models import SIPPlan
from moneymap.domain.plans import current_plans, monthly_commitment_cents, supersede_plan
from moneymap.infrastructure.database.session import get_db
from moneymap.infrastructure.database.repositories import SIPPlanRepository, plan_to_domain
from moneymap.services.reconciliation import ReconciliationService

router = APIRouter()


@router.get("/sip/plans", response_model=SIPPlansResponse)
def list_plans(
    user_id: str = Query(..., description="User identifier"),
    today: date | None = Query(None),
    db: Session = Depends(get_db),
):
    """All plan versions plus the latest active version per fund"""
    today = today or date.today()
    plans = [plan_to_domain(row) for row in SIPPlanRepository(db).list_by_user(user_id)]

    return SIPPlansResponse(
        plans=[SIPPlanSchema.model_validate(p) for p in plans],
        current=[SIPPlanSchema.model_validate(p) for p in current_plans(plans, today)],
        monthly_commitment_cents=monthly_commitment_cents(plans, today),
    )


@router.post("/sip/plans", response_model=SIPPlanSchema, status_code=201)
def create_plan(request_body: SIPPlanCreate, db: Session = Depends(get_db)):
    row = SIPPlanRepository(db).create(
        SIPPlan(
            user_id=request_body.user_id,
            fund_name=request_body.fund_name,
            amount_cents=request_body.amount_cents,
            start_date=request_body.start_date,
        )
    )
    db.commit()
    return SIPPlanSchema.model_validate(row)


@router.post("/sip/plans/{plan_id}/amount", response_model=SIPAmountChangeResponse)
def change_amount(
    plan_id: str,
    request_body: SIPAmountChange,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Change a plan's amount from next month.

    The current version is closed today and a new version starting on the
    first of next month is appended; nothing is edited in place.
    """
    try:
        plan_uuid = uuid.UUID(plan_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid plan ID format")

    today = request_body.today or date.today()
    repo = SIPPlanRepository(db)
    row = repo.get(request_body.user_id, plan_uuid)

    end_date, successor = supersede_plan(plan_to_domain(row), request_body.amount_cents, today)

    # Closing and appending commit together or not at all
    try:
        closed = repo.close(row, end_date)
        created = repo.create(successor)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"SIP amount change failed: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "SIP amount changed",
        extra={"user_id": request_body.user_id, "plan_id": plan_id, "new_plan_id": str(created.id)},
    )
    return SIPAmountChangeResponse(
        closed=SIPPlanSchema.model_validate(closed),
        created=SIPPlanSchema.model_validate(created),
    )


@router.post("/sip/skip", response_model=SkipMonthResponse)
def skip_month(
    request_body: SkipMonthRequest,
    request: Request,
    service: ReconciliationService = Depends(get_reconciliation_service),
):
    """Mark this month's SIPs as skipped so the 25th pass leaves them alone"""
    today = request_body.today or date.today()
    skipped = service.skip_month(request_body.user_id, today, request_id=get_request_id(request))
    return SkipMonthResponse(skipped=[InvestmentSchema.model_validate(i) for i in skipped])
