from __future__ import annotations

import hashlib
import hmac
from typing import Protocol


class PasswordHasher(Protocol):
    """
    Port for one-way salted hashing of account credentials and API-key secrets.

    Implementations are slow on purpose. Callers must never hold a lock
    shared with other requests while calling :meth:`hash` or :meth:`verify`.
    """

    def hash(self, secret: str) -> str: ...

    def verify(self, presented: str, stored_hash: str) -> bool: ...

    def dummy_verify(self, presented: str) -> None:
        """Spend the same time as :meth:`verify` against a throwaway hash."""
        ...


class PlainTextHasher:
    """
    Fast, *insecure* hasher for unit tests of code that only needs the port.

    Stores ``sha256:<hex>`` so tests can still assert the raw secret is
    never persisted.
    """

    PREFIX = "sha256:"

    def hash(self, secret: str) -> str:
        return self.PREFIX + hashlib.sha256(secret.encode("utf-8")).hexdigest()

    def verify(self, presented: str, stored_hash: str) -> bool:
        return hmac.compare_digest(self.hash(presented), stored_hash)

    def dummy_verify(self, presented: str) -> None:
        self.verify(presented, self.PREFIX)
