from partner_portal.models.permission import (
    Permission,
    PermissionCategory,
    PermissionLevel,
    role_permissions,
    user_permissions,
    partner_permissions,
)
from partner_portal.models.role import Role
from partner_portal.models.partner import Partner
from partner_portal.models.user import User
from partner_portal.models.session import UserSession
from partner_portal.models.curriculum import Curriculum, Subject, program_subjects
from partner_portal.models.program import Program
from partner_portal.models.channel import Channel
from partner_portal.models.campaign import Campaign, CampaignStatus
from partner_portal.models.promo_code import PromoCode
from partner_portal.models.transaction import Transaction, TransactionStatus
from partner_portal.models.enrollment import ProgramEnrollment, EnrollmentStatus
from partner_portal.models.revenue_log import PartnerRevenueLog
from partner_portal.models.wallet import Wallet, WithdrawalMethod
from partner_portal.models.withdrawal_limit import WithdrawalLimit
from partner_portal.models.withdrawal import Withdrawal, WithdrawalStatus
from partner_portal.models.audit_log import AuditLog
from partner_portal.models.notification import Notification

__all__ = [
    "Permission",
    "PermissionCategory",
    "PermissionLevel",
    "role_permissions",
    "user_permissions",
    "partner_permissions",
    "Role",
    "Partner",
    "User",
    "UserSession",
    "Curriculum",
    "Subject",
    "program_subjects",
    "Program",
    "Channel",
    "Campaign",
    "CampaignStatus",
    "PromoCode",
    "Transaction",
    "TransactionStatus",
    "ProgramEnrollment",
    "EnrollmentStatus",
    "PartnerRevenueLog",
    "Wallet",
    "WithdrawalMethod",
    "WithdrawalLimit",
    "Withdrawal",
    "WithdrawalStatus",
    "AuditLog",
    "Notification",
]
