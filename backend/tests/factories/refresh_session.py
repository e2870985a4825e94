"""Factory Boy definition for :class:`vault_api.models.refresh_session.RefreshSession`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import factory
from vault_api.models.refresh_session import RefreshSession
from vault_api.services._shared.ports import new_refresh_token

from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class RefreshSessionFactory(BaseFactory):
    """Live refresh session owned by a freshly created user unless given one."""

    class Meta:
        model = RefreshSession

    class Params:
        user = factory.SubFactory(UserFactory)
        expired = factory.Trait(
            expires_at=factory.LazyFunction(lambda: datetime.now(UTC) - timedelta(minutes=1))
        )

    token = factory.LazyFunction(new_refresh_token)
    user_id = factory.SelfAttribute("user.id")
    created_at = factory.LazyFunction(lambda: datetime.now(UTC))
    expires_at = factory.LazyAttribute(lambda o: o.created_at + timedelta(days=30))
