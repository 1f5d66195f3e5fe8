"""
Password hashing with bcrypt.
"""

import bcrypt


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


# Compared against when no account matches, so a failed login costs the same
# whether or not the email exists.
DUMMY_HASH = hash_password("relaydrive-timing-equalizer")
