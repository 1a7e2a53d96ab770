from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import NotFound
from partner_portal.dependencies import ensure_partner_access, require_permission, resolve_partner_id
from partner_portal.models import Channel, User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.channel import ChannelCreate, ChannelOut, ChannelUpdate
from partner_portal.services import channels as channel_service

router = APIRouter()


def _owned(db: Session, user: User, channel_id: int) -> Channel:
    channel = channel_service.require_channel(db, channel_id)
    ensure_partner_access(user, channel.partner_id)
    return channel


@router.get("", response_model=list[ChannelOut])
def list_channels(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    partner_id = resolve_partner_id(user, partner_id)
    return channel_service.get_channels_by_partner(db, partner_id)


@router.post("", response_model=ChannelOut, status_code=201)
def create_channel(
    payload: ChannelCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.write")),
):
    partner_id = resolve_partner_id(user, payload.partner_id)
    return channel_service.create_channel(db, partner_id, payload)


@router.get("/code/{code}", response_model=ChannelOut)
def get_channel_by_code(
    code: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    channel = channel_service.get_channel_by_code(db, code)
    if not channel:
        raise NotFound("Channel not found")
    ensure_partner_access(user, channel.partner_id)
    return channel


@router.get("/{channel_id}", response_model=ChannelOut)
def get_channel(
    channel_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    return _owned(db, user, channel_id)


@router.patch("/{channel_id}", response_model=ChannelOut)
def update_channel(
    channel_id: int,
    payload: ChannelUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.write")),
):
    _owned(db, user, channel_id)
    return channel_service.update_channel(db, channel_id, payload)


@router.delete("/{channel_id}", response_model=SoftResult)
def delete_channel(
    channel_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.admin")),
):
    _owned(db, user, channel_id)
    return channel_service.delete_channel(db, channel_id)
