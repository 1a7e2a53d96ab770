import secrets
import string

import bcrypt

from partner_portal.core.config import get_settings

SESSION_TOKEN_LENGTH = 64
SESSION_TOKEN_ALPHABET = string.ascii_letters + string.digits
PASSWORD_LENGTH = 12
PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*()"
EXTENSION_LENGTH = 8
EXTENSION_ALPHABET = string.ascii_lowercase + string.digits
SUPER_ADMIN_EXTENSION_PREFIX = "admin-"


def _random_string(alphabet: str, length: int) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def hash_password(password: str) -> str:
    settings = get_settings()
    salt = bcrypt.gensalt(rounds=settings.password_bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database.
        return False


# Wallet PINs use the same primitive as passwords.
hash_pin = hash_password
verify_pin_hash = verify_password


def generate_session_token() -> str:
    return _random_string(SESSION_TOKEN_ALPHABET, SESSION_TOKEN_LENGTH)


def generate_password() -> str:
    return _random_string(PASSWORD_ALPHABET, PASSWORD_LENGTH)


def generate_extension(super_admin: bool = False) -> str:
    body = _random_string(EXTENSION_ALPHABET, EXTENSION_LENGTH)
    suffix = 1000 + secrets.randbelow(9000)
    prefix = SUPER_ADMIN_EXTENSION_PREFIX if super_admin else ""
    return f"{prefix}{body}-{suffix}"


def generate_redeem_code() -> str:
    return f"R-{100000 + secrets.randbelow(900000)}"
