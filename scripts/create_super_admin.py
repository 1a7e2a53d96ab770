"""Create a platform super admin and print its one-time credentials.

Usage: python scripts/create_super_admin.py admin@example.com "Admin Name" [phone]
"""
import sys

from partner_portal.core.database import SessionLocal
from partner_portal.core.errors import PortalError
from partner_portal.core.logging import configure_logging
from partner_portal.services.partners import create_super_admin
from partner_portal.services.permissions import seed_permissions
from partner_portal.services.roles import seed_default_roles


def main(argv: list[str]) -> int:
    if len(argv) < 3:
        print(__doc__.strip())
        return 2
    email, name = argv[1], argv[2]
    phone = argv[3] if len(argv) > 3 else None

    configure_logging()
    db = SessionLocal()
    try:
        seed_permissions(db)
        seed_default_roles(db)
        credentials = create_super_admin(db, email=email, name=name, phone=phone)
    except PortalError as exc:
        print(f"ERROR: {exc.message}")
        return 1
    finally:
        db.close()

    print("Super admin created. These credentials are shown once:")
    print(f"  email:     {credentials['email']}")
    print(f"  extension: {credentials['extension']}")
    print(f"  password:  {credentials['password']}")
    print(f"  login:     {credentials['login_url']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
