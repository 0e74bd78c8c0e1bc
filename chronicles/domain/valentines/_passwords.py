"""bcrypt password checks for Valentines participants (`$2a$`/`$2b$` hashes)."""

import bcrypt

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def verify_password(password: str, stored: str) -> bool:
    """Check `password` against a stored bcrypt hash; malformed hashes never match."""
    if not stored:
        return False
    try:
        return bcrypt.checkpw(
            str(password).encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES],
            str(stored).encode("utf-8"),
        )
    except ValueError:
        return False
