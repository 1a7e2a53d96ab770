from partner_portal.core.security import (
    PASSWORD_LENGTH,
    SESSION_TOKEN_LENGTH,
    generate_extension,
    generate_password,
    generate_redeem_code,
    generate_session_token,
    hash_password,
    verify_password,
)


def test_hash_and_verify_password():
    hashed = hash_password("Password123!")
    assert hashed != "Password123!"
    assert verify_password("Password123!", hashed)
    assert not verify_password("Password124!", hashed)


def test_verify_password_rejects_missing_or_malformed_hash():
    assert not verify_password("Password123!", None)
    assert not verify_password("", hash_password("x"))
    assert not verify_password("Password123!", "not-a-bcrypt-hash")


def test_session_tokens_are_alphanumeric_and_unique():
    tokens = {generate_session_token() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == SESSION_TOKEN_LENGTH
        assert token.isalnum()


def test_generated_password_length():
    assert len(generate_password()) == PASSWORD_LENGTH


def test_extension_format():
    extension = generate_extension()
    body, suffix = extension.rsplit("-", 1)
    assert len(body) == 8
    assert 1000 <= int(suffix) <= 9999
    assert generate_extension(super_admin=True).startswith("admin-")


def test_redeem_code_format():
    code = generate_redeem_code()
    assert code.startswith("R-")
    assert 100000 <= int(code[2:]) <= 999999
