from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import require_permission
from partner_portal.models import User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.program import ProgramCreate, ProgramOut, ProgramUpdate
from partner_portal.services import programs as program_service

router = APIRouter()


@router.get("", response_model=list[ProgramOut])
def list_programs(
    is_active: Optional[bool] = None,
    curriculum_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.read")),
):
    _ = user
    return program_service.list_programs(db, is_active=is_active, curriculum_id=curriculum_id)


@router.post("", response_model=ProgramOut, status_code=201)
def create_program(
    payload: ProgramCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.write")),
):
    _ = user
    return program_service.create_program(db, payload)


@router.get("/{program_id}", response_model=ProgramOut)
def get_program(
    program_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.read")),
):
    _ = user
    return program_service.require_program(db, program_id)


@router.get("/{program_id}/purchases-count")
def purchases_count(
    program_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.read")),
):
    _ = user
    program_service.require_program(db, program_id)
    return {"program_id": program_id, "count": program_service.get_purchases_count(db, program_id)}


@router.patch("/{program_id}", response_model=ProgramOut)
def update_program(
    program_id: int,
    payload: ProgramUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.write")),
):
    _ = user
    return program_service.update_program(db, program_id, payload)


@router.delete("/{program_id}", response_model=SoftResult)
def delete_program(
    program_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("programs.admin")),
):
    _ = user
    return program_service.delete_program(db, program_id)
