# vault_api/services/users/service.py
from __future__ import annotations

from vault_api.services._shared.base import BaseService, ServiceContext
from vault_api.services._shared.errors import UserDeletedError
from vault_api.services._shared.ports.user_store import UserRecord, UserStore
from vault_api.services.users.dto import ExportedUser, UserExportOut, UserOut


class UserService(BaseService):
    """
    Read-side operations on the authenticated account.

    Both operations take the subject of an already-verified access token.
    Access tokens outlive account deletion, so a missing account is
    reported as :class:`UserDeletedError` rather than as a server fault.
    """

    def __init__(self, *, users: UserStore, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.users = users

    def _require(self, user_id: str, operation: str) -> UserRecord:
        with self.guard(operation):
            user = self.users.find_by_id(user_id)
        if user is None:
            raise UserDeletedError()
        return user

    def get_current_user(self, user_id: str) -> UserOut:
        """
        Return the profile of ``user_id``.

        :raises UserDeletedError: The account no longer exists.
        """
        user = self._require(user_id, "get_current_user")
        return UserOut(
            id=user.id,
            username=user.username,
            role=user.role.value,
            created_at=user.created_at,
        )

    def export_user_data(self, user_id: str) -> UserExportOut:
        """
        Return the personal-data export of ``user_id``.

        :raises UserDeletedError: The account no longer exists.
        """
        user = self._require(user_id, "export_user_data")
        return UserExportOut(user=ExportedUser(id=user.id, username=user.username))
