"""Seed the permission catalog and the default roles. Safe to re-run."""
from partner_portal.core.database import SessionLocal
from partner_portal.core.logging import configure_logging
from partner_portal.services.permissions import seed_permissions
from partner_portal.services.roles import seed_default_roles


def main():
    configure_logging()
    db = SessionLocal()
    try:
        permissions = seed_permissions(db)
        print(f"Permissions: {permissions['message']} (existing={permissions['existing_count']}, created={permissions['created']})")
        roles = seed_default_roles(db)
        print(f"Roles: {roles['message']} (existing={roles['existing_count']}, created={roles['created']})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
