from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skilltrade import models, schemas
from skilltrade.crud import skill as skill_crud
from skilltrade.database import get_db
from skilltrade.schemas.skill import UserSkillRemoved
from skilltrade.utils.security import get_current_user

router = APIRouter(prefix="/user-skills", tags=["User Skills"])


@router.get("", response_model=List[schemas.UserSkill])
def get_my_skills(
    role: Optional[str] = Query(None, description="teach or learn"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return skill_crud.list_user_skills(db, current_user.id, role=role)


@router.post("", response_model=schemas.UserSkillResult)
def add_my_skill(
    payload: schemas.UserSkillCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Add a skill to the caller's teach or learn list.

    Re-declaring the same skill and role updates level and description
    and reports ``action="updated"``.
    """
    entry, action = skill_crud.add_user_skill(
        db,
        current_user.id,
        role=payload.role,
        level=payload.level,
        skill_id=payload.skill_id,
        skill_name=payload.skill_name,
        category=payload.category,
        description=payload.description,
    )
    db.commit()
    db.refresh(entry)
    return {"action": action, "user_skill": entry}


@router.delete("/{skill_id}", response_model=UserSkillRemoved)
def remove_my_skill(
    skill_id: int,
    role: Optional[str] = Query(None, description="Only remove this role"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    removed = skill_crud.remove_user_skill(db, current_user.id, skill_id, role=role)
    db.commit()
    return {"skill_id": skill_id, "removed": removed}
