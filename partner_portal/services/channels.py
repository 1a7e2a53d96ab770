"""Partner distribution channels.

A channel groups where a partner sells (a school network, a radio slot, a
field team) under a short code. Codes are upper-cased and unique across
partners; sub-channels are free-form labels kept in order.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core.errors import Conflict, NotFound
from partner_portal.models import Channel
from partner_portal.schemas.channel import ChannelCreate, ChannelUpdate
from partner_portal.services.partners import require_partner

logger = logging.getLogger(__name__)


def canonical_code(code: str) -> str:
    return (code or "").strip().upper()


def clean_subchannels(values: list[str]) -> list[str]:
    seen = []
    for value in values or []:
        label = " ".join(value.split())
        if label and label not in seen:
            seen.append(label)
    return seen


def get_channel(db: Session, channel_id: int) -> Optional[Channel]:
    return db.query(Channel).filter(Channel.id == channel_id).first()


def require_channel(db: Session, channel_id: int) -> Channel:
    channel = get_channel(db, channel_id)
    if not channel:
        raise NotFound("Channel not found")
    return channel


def get_channel_by_code(db: Session, code: str) -> Optional[Channel]:
    return db.query(Channel).filter(Channel.code == canonical_code(code)).first()


def get_channels_by_partner(db: Session, partner_id: int) -> list[Channel]:
    return db.query(Channel).filter(Channel.partner_id == partner_id).order_by(Channel.id.asc()).all()


def create_channel(db: Session, partner_id: int, payload: ChannelCreate) -> Channel:
    require_partner(db, partner_id)
    code = canonical_code(payload.code)
    if get_channel_by_code(db, code):
        raise Conflict(f"Channel code {code} already exists")

    channel = Channel(
        partner_id=partner_id,
        name=payload.name.strip(),
        code=code,
        subchannels=clean_subchannels(payload.subchannels),
        description=payload.description,
    )
    db.add(channel)
    db.commit()
    db.refresh(channel)
    logger.info("Created channel id=%s code=%s partner_id=%s", channel.id, code, partner_id)
    return channel


def update_channel(db: Session, channel_id: int, payload: ChannelUpdate) -> Channel:
    channel = require_channel(db, channel_id)
    fields_set = payload.model_fields_set
    if "name" in fields_set and payload.name is not None:
        channel.name = payload.name.strip()
    if "code" in fields_set and payload.code is not None:
        code = canonical_code(payload.code)
        clash = get_channel_by_code(db, code)
        if clash and clash.id != channel.id:
            raise Conflict(f"Channel code {code} already exists")
        channel.code = code
    if "subchannels" in fields_set and payload.subchannels is not None:
        channel.subchannels = clean_subchannels(payload.subchannels)
    if "description" in fields_set:
        channel.description = payload.description
    db.commit()
    db.refresh(channel)
    return channel


def delete_channel(db: Session, channel_id: int) -> dict:
    channel = require_channel(db, channel_id)
    db.delete(channel)
    db.commit()
    return {"success": True}
