"""GET/PUT /v1/profile - display name and configured EPF amount"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from moneymap.api.v1.schemas import ProfileSchema, ProfileUpdate
from moneymap.config import settings
from moneymap.infrastructure.database.session import get_db
from moneymap.infrastructure.database.repositories import ProfileRepository

router = APIRouter()


def _to_schema(user_id: str, full_name, epf_monthly_cents) -> ProfileSchema:
    return ProfileSchema(
        user_id=user_id,
        full_name=full_name,
        epf_monthly_cents=epf_monthly_cents,
        effective_epf_monthly_cents=epf_monthly_cents or settings.default_epf_monthly_cents,
    )


@router.get("/profile", response_model=ProfileSchema)
def get_profile(user_id: str = Query(...), db: Session = Depends(get_db)):
    profile = ProfileRepository(db).get(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _to_schema(profile.id, profile.full_name, profile.epf_monthly_cents)


@router.put("/profile", response_model=ProfileSchema)
def update_profile(request_body: ProfileUpdate, db: Session = Depends(get_db)):
    """Create or replace the profile; the EPF amount feeds future automatic contributions"""
    profile = ProfileRepository(db).upsert(
        request_body.user_id,
        request_body.full_name,
        request_body.epf_monthly_cents,
    )
    db.commit()
    return _to_schema(profile.id, profile.full_name, profile.epf_monthly_cents)
