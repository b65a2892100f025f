from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skilltrade import models, schemas
from skilltrade.crud import skill as skill_crud
from skilltrade.database import get_db
from skilltrade.schemas.common import Detail
from skilltrade.utils.security import get_current_user

router = APIRouter(prefix="/skills", tags=["Skills"])


# ======================
# GET: All skills (public)
# ======================
@router.get("", response_model=List[schemas.Skill])
def get_all_skills(db: Session = Depends(get_db)):
    return skill_crud.list_skills(db)


# ======================
# POST: Register a new skill
# ======================
@router.post("", response_model=schemas.Skill, status_code=201)
def create_skill(
    payload: schemas.SkillCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    skill = skill_crud.create_skill(db, payload.name, payload.category, payload.description)
    db.commit()
    db.refresh(skill)
    return skill


# ======================
# PUT: Rename / re-categorise
# ======================
@router.put("/{skill_id}", response_model=schemas.Skill)
def update_skill(
    skill_id: int,
    payload: schemas.SkillUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    skill = skill_crud.update_skill(
        db,
        skill_id,
        name=payload.name,
        category=payload.category,
        description=payload.description,
    )
    db.commit()
    db.refresh(skill)
    return skill


# ======================
# DELETE: Unreferenced skills only
# ======================
@router.delete("/{skill_id}", response_model=Detail)
def delete_skill(
    skill_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    skill_crud.delete_skill(db, skill_id)
    db.commit()
    return {"message": "Skill deleted"}
