import enum
from sqlalchemy import Column, Integer, String, Boolean, Enum, ForeignKey, Index, Table
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class PermissionCategory(str, enum.Enum):
    USERS = "users"
    CAMPAIGNS = "campaigns"
    PROGRAMS = "programs"
    WALLET = "wallet"
    DASHBOARD = "dashboard"
    SETTINGS = "settings"
    ALL_ACCESS = "all_access"


class PermissionLevel(str, enum.Enum):
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"
    FULL = "full"


role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)

user_permissions = Table(
    "user_permissions",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)

partner_permissions = Table(
    "partner_permissions",
    Base.metadata,
    Column("partner_id", Integer, ForeignKey("partners.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(Base, TimestampMixin):
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(128), nullable=False)
    description = Column(String(255), nullable=True)
    category = Column(Enum(PermissionCategory), nullable=False)
    level = Column(Enum(PermissionLevel), nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)


Index("ix_permissions_category_level", Permission.category, Permission.level)
