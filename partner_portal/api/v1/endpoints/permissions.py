from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import get_current_user, require_platform_admin
from partner_portal.models import PermissionCategory, User
from partner_portal.schemas.role import PermissionOut, SeedResult
from partner_portal.services.permissions import get_permissions, seed_permissions

router = APIRouter()


@router.get("", response_model=list[PermissionOut])
def list_permissions(
    category: Optional[PermissionCategory] = None,
    is_default: Optional[bool] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _ = user
    return get_permissions(db, category=category, is_default=is_default)


@router.post("/seed", response_model=SeedResult)
def seed(db: Session = Depends(get_db), admin: User = Depends(require_platform_admin)):
    _ = admin
    return seed_permissions(db)
