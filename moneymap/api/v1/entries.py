"""EPF contributions and investments"""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from moneymap.api.v1.schemas import EPFContributionSchema, EPFCreate, InvestmentCreate, InvestmentSchema
from moneymap.domain.models import EPFContribution, Investment
from moneymap.infrastructure.database.session import get_db
from moneymap.infrastructure.database.repositories import EPFRepository, InvestmentRepository

router = APIRouter()


@router.get("/epf", response_model=List[EPFContributionSchema])
def list_epf(user_id: str = Query(...), db: Session = Depends(get_db)):
    """Contributions, newest first"""
    return [EPFContributionSchema.model_validate(row) for row in EPFRepository(db).list_by_user(user_id)]


@router.post("/epf", response_model=EPFContributionSchema, status_code=201)
def add_epf(request_body: EPFCreate, db: Session = Depends(get_db)):
    row = EPFRepository(db).create(
        EPFContribution(
            user_id=request_body.user_id,
            amount_cents=request_body.amount_cents,
            date=request_body.date,
            notes=request_body.notes,
        )
    )
    db.commit()
    return EPFContributionSchema.model_validate(row)


@router.get("/investments", response_model=List[InvestmentSchema])
def list_investments(user_id: str = Query(...), db: Session = Depends(get_db)):
    return [InvestmentSchema.model_validate(row) for row in InvestmentRepository(db).list_by_user(user_id)]


@router.post("/investments", response_model=InvestmentSchema, status_code=201)
def add_investment(request_body: InvestmentCreate, db: Session = Depends(get_db)):
    row = InvestmentRepository(db).create(
        Investment(
            user_id=request_body.user_id,
            type=request_body.type,
            name=request_body.name,
            amount_cents=request_body.amount_cents,
            date=request_body.date,
            sip_plan_id=request_body.sip_plan_id,
            notes=request_body.notes,
        )
    )
    db.commit()
    return InvestmentSchema.model_validate(row)
