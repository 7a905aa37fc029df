"""
Credential hashing and verification.

The rest of the app only depends on the PasswordHasher interface:
gen_salt(), hash(plaintext, salt), verify(plaintext, digest) and a
`dummy_digest` to verify against when no account matches. BcryptHasher is
the implementation used in production.
"""
import logging
from typing import Protocol

import bcrypt

logger = logging.getLogger(__name__)


class PasswordHasher(Protocol):
    # a valid digest of some throwaway secret, checked on unknown accounts
    dummy_digest: str

    def gen_salt(self) -> str:
        ...

    def hash(self, plaintext: str, salt: str) -> str:
        ...

    def verify(self, plaintext: str, digest: str) -> bool:
        ...


# bcrypt only looks at the first 72 bytes; newer releases raise instead of
# truncating, so truncate explicitly and keep hash and verify consistent.
MAX_PASSWORD_BYTES = 72


def _secret(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES]


class BcryptHasher:
    """Slow, salted, one-way hashing with bcrypt."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        # Compared against when an account does not exist, so unknown
        # usernames cost the same as wrong passwords.
        self.dummy_digest = self.hash("dummy-password", self.gen_salt())

    def gen_salt(self) -> str:
        return bcrypt.gensalt(rounds=self.rounds).decode("utf-8")

    def hash(self, plaintext: str, salt: str) -> str:
        return bcrypt.hashpw(_secret(plaintext), salt.encode("utf-8")).decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        if not digest:
            return False
        try:
            return bcrypt.checkpw(_secret(plaintext), digest.encode("utf-8"))
        except ValueError:
            logger.warning("Stored credential digest is malformed")
            return False
