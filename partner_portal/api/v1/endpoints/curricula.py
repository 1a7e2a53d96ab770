from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import require_permission
from partner_portal.models import User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.curriculum import (
    CurriculumCreate,
    CurriculumOut,
    CurriculumUpdate,
    SubjectCreate,
    SubjectOut,
    SubjectUpdate,
)
from partner_portal.services import curricula as curriculum_service

router = APIRouter()


@router.get("/subjects", response_model=list[SubjectOut])
def list_subjects(db: Session = Depends(get_db), user: User = Depends(require_permission("programs.read"))):
    _ = user
    return curriculum_service.list_subjects(db)


@router.post("/subjects", response_model=SubjectOut, status_code=201)
def create_subject(
    payload: SubjectCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.write")),
):
    _ = user
    return curriculum_service.create_subject(db, payload)


@router.get("/subjects/{subject_id}", response_model=SubjectOut)
def get_subject(
    subject_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.read")),
):
    _ = user
    return curriculum_service.require_subject(db, subject_id)


@router.patch("/subjects/{subject_id}", response_model=SubjectOut)
def update_subject(
    subject_id: int,
    payload: SubjectUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.write")),
):
    _ = user
    return curriculum_service.update_subject(db, subject_id, payload)


@router.delete("/subjects/{subject_id}", response_model=SoftResult)
def delete_subject(
    subject_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.admin")),
):
    _ = user
    return curriculum_service.delete_subject(db, subject_id)


@router.get("", response_model=list[CurriculumOut])
def list_curricula(db: Session = Depends(get_db), user: User = Depends(require_permission("programs.read"))):
    _ = user
    return curriculum_service.list_curricula(db)


@router.post("", response_model=CurriculumOut, status_code=201)
def create_curriculum(
    payload: CurriculumCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.write")),
):
    _ = user
    return curriculum_service.create_curriculum(db, payload)


@router.get("/{curriculum_id}", response_model=CurriculumOut)
def get_curriculum(
    curriculum_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.read")),
):
    _ = user
    return curriculum_service.require_curriculum(db, curriculum_id)


@router.patch("/{curriculum_id}", response_model=CurriculumOut)
def update_curriculum(
    curriculum_id: int,
    payload: CurriculumUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.write")),
):
    _ = user
    return curriculum_service.update_curriculum(db, curriculum_id, payload)


@router.delete("/{curriculum_id}", response_model=SoftResult)
def delete_curriculum(
    curriculum_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.admin")),
):
    _ = user
    return curriculum_service.delete_curriculum(db, curriculum_id)
