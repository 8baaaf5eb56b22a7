"""Password hashing for employee logins."""

from pwdlib import PasswordHash

password_hash = PasswordHash.recommended()

# Verified against when the login email is unknown, so both paths cost one Argon2 check
_UNKNOWN_USER_HASH = password_hash.hash("traintrack-unknown-user")


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a login password. A missing hash never verifies."""
    if not hashed_password:
        password_hash.verify(plain_password, _UNKNOWN_USER_HASH)
        return False
    return password_hash.verify(plain_password, hashed_password)
