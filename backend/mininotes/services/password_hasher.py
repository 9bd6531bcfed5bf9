"""
Mini Notes Backend — Password Hashing
=======================================

What:  bcrypt hashing and verification of user passwords.
Why:   bcrypt is salted per hash and adaptive: the cost factor makes each
       guess expensive, and raising it later only affects new hashes
       (the cost is encoded in the hash string itself).
How:   Thin wrapper over the `bcrypt` package with a fixed cost factor.

Cost factor:
    12 rounds ≈ 250ms per hash on a modern core. Tests lower it to 4 through
    BCRYPT_ROUNDS so the suite is not dominated by hashing time.

Note:
    bcrypt only uses the first 72 bytes of the password. Longer passwords
    are truncated before hashing so that bcrypt>=4.1, which rejects them,
    behaves like older releases.
"""

import bcrypt

# bcrypt's hard input limit
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Hashes with a fixed cost factor; verifies hashes of any cost."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time check. A corrupt stored hash verifies as False."""
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except (ValueError, TypeError):
            return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]
