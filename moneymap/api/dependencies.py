"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from moneymap.infrastructure.database.session import get_db
from moneymap.services.reconciliation import ReconciliationService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_reconciliation_service(db: Session = Depends(get_db)) -> ReconciliationService:
    """Provide reconciliation service bound to the request's session"""
    return ReconciliationService(db)
