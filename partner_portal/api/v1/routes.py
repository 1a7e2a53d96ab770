from fastapi import APIRouter
from partner_portal.api.v1.endpoints import (
    audit,
    auth,
    campaigns,
    channels,
    curricula,
    enrollments,
    notifications,
    partners,
    permissions,
    programs,
    promo_codes,
    revenue,
    roles,
    transactions,
    users,
    wallet,
    withdrawal_limits,
    withdrawals,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(partners.router, prefix="/partners", tags=["partners"])
router.include_router(roles.router, prefix="/roles", tags=["roles"])
router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
router.include_router(programs.router, prefix="/programs", tags=["programs"])
router.include_router(curricula.router, prefix="/curricula", tags=["curricula"])
router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
router.include_router(promo_codes.router, prefix="/promo-codes", tags=["promo-codes"])
router.include_router(channels.router, prefix="/channels", tags=["channels"])
router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["enrollments"])
router.include_router(revenue.router, prefix="/revenue", tags=["revenue"])
router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
router.include_router(withdrawal_limits.router, prefix="/withdrawal-limits", tags=["withdrawal-limits"])
router.include_router(withdrawals.router, prefix="/withdrawals", tags=["withdrawals"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(audit.router, prefix="/audit", tags=["audit"])
