"""POST /v1/reconcile - recurring EPF and SIP entries for the current month"""

from datetime import date
from fastapi import APIRouter, Depends, Request

from moneymap.api.v1.schemas import (
    EPFContributionSchema,
    InvestmentSchema,
    ReconcileRequest,
    ReconcileResponse,
)
from moneymap.api.dependencies import get_reconciliation_service, get_request_id
from moneymap.services.reconciliation import ReconciliationService

router = APIRouter()


@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile(
    request_body: ReconcileRequest,
    request: Request,
    service: ReconciliationService = Depends(get_reconciliation_service),
):
    """
    Run the once-per-session reconciliation pass.

    Flow:
    1. Return immediately if the session already reconciled this month
    2. Insert this month's EPF contribution on/after the 5th if missing
    3. Insert one SIP investment per active plan on/after the 25th if missing
    4. Return the inserted rows and the new session marker

    Always answers 200; failures only mean fewer rows were added.
    """
    today = request_body.today or date.today()

    result = service.reconcile(
        user_id=request_body.user_id,
        today=today,
        last_reconciled_month=request_body.last_reconciled_month,
        request_id=get_request_id(request),
    )

    return ReconcileResponse(
        epf_added=result.epf_added,
        investments_added=result.investments_added,
        inserted_epf=[EPFContributionSchema.model_validate(c) for c in result.inserted_epf],
        inserted_investments=[InvestmentSchema.model_validate(i) for i in result.inserted_investments],
        last_reconciled_month=result.month,
    )
