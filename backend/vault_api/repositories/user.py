"""User repository: persistence-only access to :class:`User` rows."""

from __future__ import annotations

from vault_api.models.user import User
from vault_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Lookups are exact: usernames are case-sensitive. Credential hashing and
    verification live in the store adapter, never here.
    """

    model = User

    def _default_order(self):
        return [User.created_at.asc(), User.username.asc()]

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact username (surrounding whitespace ignored).

        :param username: Login name.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        return self.find_one(username=username.strip())

    def exists_by_username(self, username: str) -> bool:
        return self.exists(username=username.strip())
