# vault_api/infra/crypto/bcrypt_hasher.py
from __future__ import annotations

import base64
import hashlib

import bcrypt

DEFAULT_ROUNDS = 12


class BcryptPasswordHasher:
    """
    bcrypt adapter for :class:`~vault_api.services._shared.ports.PasswordHasher`.

    bcrypt only reads the first 72 bytes of its input, so secrets are first
    reduced to ``base64(sha256(secret))`` (44 ASCII bytes, no NUL). Every
    byte of a long secret therefore still counts.

    :param rounds: bcrypt cost factor (4..31).
    :type rounds: int
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be within 4..31, got {rounds}")
        self.rounds = rounds
        # Same cost as real hashes so unknown-user logins take as long as known ones
        self._dummy_hash = bcrypt.hashpw(b"vault-api-dummy", bcrypt.gensalt(rounds=rounds))

    @staticmethod
    def _prehash(secret: str) -> bytes:
        return base64.b64encode(hashlib.sha256(secret.encode("utf-8")).digest())

    def hash(self, secret: str) -> str:
        return bcrypt.hashpw(self._prehash(secret), bcrypt.gensalt(rounds=self.rounds)).decode(
            "ascii"
        )

    def verify(self, presented: str, stored_hash: str) -> bool:
        try:
            return bcrypt.checkpw(self._prehash(presented), stored_hash.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError):
            return False

    def dummy_verify(self, presented: str) -> None:
        bcrypt.checkpw(self._prehash(presented), self._dummy_hash)
