"""
DTOs for UserService.

Data Transfer Objects isolate the service layer from ORM rows and from the
store read-models, ensuring clear output contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

#: Version of the export document shape.
EXPORT_VERSION = 1


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public profile of the authenticated user.

    :param id: User identifier.
    :type id: str
    :param username: Stored username.
    :type username: str
    :param role: ``admin`` or ``member``.
    :type role: str
    :param created_at: Account creation instant.
    :type created_at: datetime
    """

    id: str
    username: str
    role: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ExportedUser:
    """
    The user identity as it appears inside an export, exactly ``{id, username}``.

    :param id: User identifier.
    :type id: str
    :param username: Stored username.
    :type username: str
    """

    id: str
    username: str


@dataclass(frozen=True, slots=True)
class UserExportOut:
    """
    Versioned personal-data export.

    :param user: Exported identity.
    :type user: ExportedUser
    :param version: Document shape version.
    :type version: int
    """

    user: ExportedUser
    version: int = field(default=EXPORT_VERSION)

    def as_dict(self) -> dict[str, Any]:
        return {"version": self.version, "user": {"id": self.user.id, "username": self.user.username}}
