"""Salaries, expenses and bank accounts"""

import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from moneymap.api.v1.schemas import (
    BankAccountCreate,
    BankAccountSchema,
    BanksResponse,
    ExpenseCreate,
    ExpenseSchema,
    SalaryCreate,
    SalarySchema,
)
from moneymap.domain.models import BankAccount, Expense, Salary
from moneymap.infrastructure.database.session import get_db
from moneymap.infrastructure.database.repositories import (
    BankAccountRepository,
    ExpenseRepository,
    SalaryRepository,
)

router = APIRouter()


def _parse_id(raw: str, kind: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {kind} ID format")


@router.get("/salaries", response_model=List[SalarySchema])
def list_salaries(user_id: str = Query(...), db: Session = Depends(get_db)):
    return [SalarySchema.model_validate(row) for row in SalaryRepository(db).list_by_user(user_id)]


@router.post("/salaries", response_model=SalarySchema, status_code=201)
def add_salary(request_body: SalaryCreate, db: Session = Depends(get_db)):
    if request_body.end_date is not None and request_body.end_date < request_body.start_date:
        raise HTTPException(status_code=422, detail="end_date is before start_date")

    row = SalaryRepository(db).create(
        Salary(
            user_id=request_body.user_id,
            amount_cents=request_body.amount_cents,
            start_date=request_body.start_date,
            end_date=request_body.end_date,
        )
    )
    db.commit()
    return SalarySchema.model_validate(row)


@router.get("/expenses", response_model=List[ExpenseSchema])
def list_expenses(
    user_id: str = Query(...),
    since: Optional[date] = Query(None, description="Only expenses on or after this date"),
    db: Session = Depends(get_db),
):
    return [ExpenseSchema.model_validate(row) for row in ExpenseRepository(db).list_by_user(user_id, since)]


@router.post("/expenses", response_model=ExpenseSchema, status_code=201)
def add_expense(request_body: ExpenseCreate, db: Session = Depends(get_db)):
    row = ExpenseRepository(db).create(
        Expense(
            user_id=request_body.user_id,
            date=request_body.date,
            amount_cents=request_body.amount_cents,
            category=request_body.category.value,
            description=request_body.description,
            dr_cr=request_body.dr_cr,
        )
    )
    db.commit()
    return ExpenseSchema.model_validate(row)


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(expense_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    ExpenseRepository(db).delete(user_id, _parse_id(expense_id, "expense"))
    db.commit()
    return Response(status_code=204)


@router.get("/banks", response_model=BanksResponse)
def list_banks(user_id: str = Query(...), db: Session = Depends(get_db)):
    rows = BankAccountRepository(db).list_by_user(user_id)
    return BanksResponse(
        accounts=[BankAccountSchema.model_validate(row) for row in rows],
        total_balance_cents=sum(row.balance_cents for row in rows),
    )


@router.post("/banks", response_model=BankAccountSchema, status_code=201)
def add_bank(request_body: BankAccountCreate, db: Session = Depends(get_db)):
    row = BankAccountRepository(db).create(
        BankAccount(
            user_id=request_body.user_id,
            bank_name=request_body.bank_name,
            account_type=request_body.account_type,
            balance_cents=request_body.balance_cents,
        )
    )
    db.commit()
    return BankAccountSchema.model_validate(row)


@router.put("/banks/{account_id}", response_model=BankAccountSchema)
def update_bank(account_id: str, request_body: BankAccountCreate, db: Session = Depends(get_db)):
    repo = BankAccountRepository(db)
    row = repo.get(request_body.user_id, _parse_id(account_id, "account"))
    repo.update(row, request_body.bank_name, request_body.account_type, request_body.balance_cents)
    db.commit()
    return BankAccountSchema.model_validate(row)


@router.delete("/banks/{account_id}", status_code=204)
def delete_bank(account_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    repo = BankAccountRepository(db)
    repo.delete(repo.get(user_id, _parse_id(account_id, "account")))
    db.commit()
    return Response(status_code=204)
