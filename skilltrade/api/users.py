from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skilltrade import models, schemas
from skilltrade.crud import availability as availability_crud
from skilltrade.crud import skill as skill_crud
from skilltrade.crud import user as user_crud
from skilltrade.database import get_db
from skilltrade.schemas.user import AvailabilitySlotOut
from skilltrade.services import review_service, stats_service
from skilltrade.utils.security import get_current_user

router = APIRouter(tags=["Users"])


# =========================
# CURRENT USER
# =========================
@router.get("/auth/user", response_model=schemas.User)
def get_me(current_user: models.User = Depends(get_current_user)):
    return current_user


@router.get("/profile", response_model=schemas.Profile)
def get_profile(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {
        "user": current_user,
        "skills": skill_crud.list_user_skills(db, current_user.id),
        "stats": stats_service.user_stats(db, current_user.id),
        "rating": review_service.rating_for(db, current_user.id),
    }


@router.put("/profile", response_model=schemas.User)
def update_profile(
    payload: schemas.ProfileUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_crud.upsert_user(
        db, user_id=current_user.id, **payload.model_dump(exclude_unset=True)
    )
    db.commit()
    db.refresh(user)
    return user


@router.get("/stats", response_model=schemas.Stats)
def get_stats(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return stats_service.user_stats(db, current_user.id)


# =========================
# AVAILABILITY
# =========================
@router.get("/availability", response_model=List[AvailabilitySlotOut])
def get_my_availability(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return availability_crud.get_user_availability(db, current_user.id)


@router.put("/availability", response_model=List[AvailabilitySlotOut])
def set_my_availability(
    payload: schemas.AvailabilityUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = availability_crud.set_user_availability(
        db, current_user.id, [slot.model_dump() for slot in payload.slots]
    )
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows


@router.get("/availability/{user_id}", response_model=List[AvailabilitySlotOut])
def get_user_availability(user_id: str, db: Session = Depends(get_db)):
    user_crud.require_user(db, user_id)
    return availability_crud.get_user_availability(db, user_id)
