"""Unit of Work contract shared by the SQLAlchemy implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Self

if TYPE_CHECKING:
    from vault_api.repositories import (
        ApiKeyRepository,
        RefreshSessionRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    Transaction boundary over the identity repositories.

    All three repositories share one session, so a user row and the
    credentials that hang off it (refresh sessions, API keys) change
    together or not at all.
    """

    users: UserRepository
    sessions: RefreshSessionRepository
    api_keys: ApiKeyRepository

    #: ``False`` for implementations that refuse every write.
    writable: ClassVar[bool] = True

    def __enter__(self) -> Self:
        return self

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
