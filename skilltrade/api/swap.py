from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skilltrade import models, schemas
from skilltrade.database import get_db
from skilltrade.services import match_service, swap_service
from skilltrade.utils.security import get_current_user

router = APIRouter(tags=["Swaps"])


# ======================
# MATCHES
# ======================
@router.get("/swap-matches", response_model=List[schemas.Match])
def get_swap_matches(
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    exclude_open_swaps: bool = Query(False, alias="excludeOpenSwaps"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return match_service.find_matches(
        db,
        current_user.id,
        limit=limit,
        offset=offset,
        exclude_open_swaps=exclude_open_swaps,
    )


# ======================
# SWAPS
# ======================
@router.get("/swaps", response_model=List[schemas.Swap])
def get_my_swaps(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return swap_service.swaps_for_user(db, current_user.id)


@router.get("/swaps/{swap_id}", response_model=schemas.Swap)
def get_swap(
    swap_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    swap = swap_service.get_swap_for_participant(db, swap_id, current_user.id)
    return swap_service.serialize_swap(swap, current_user.id)


@router.post("/swaps", response_model=schemas.Swap, status_code=201)
def propose_swap(
    payload: schemas.SwapCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # The requester is always the caller, never a body field.
    swap = swap_service.create_swap(
        db,
        requester_id=current_user.id,
        provider_id=payload.provider_id,
        requester_skill_id=payload.requester_skill_id,
        provider_skill_id=payload.provider_skill_id,
        message=payload.message,
        validate_skills=True,
    )
    return swap_service.serialize_swap(swap, current_user.id)


@router.put("/swaps/{swap_id}/status", response_model=schemas.Swap)
def update_swap_status(
    swap_id: int,
    payload: schemas.SwapStatusUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    swap = swap_service.update_swap_status(db, swap_id, current_user.id, payload.status)
    return swap_service.serialize_swap(swap, current_user.id)
