"""Factory Boy definition for :class:`vault_api.models.api_key.ApiKey`."""

from __future__ import annotations

from datetime import UTC, datetime

import factory
from vault_api.models.api_key import ApiKey

from tests.factories import BaseFactory
from tests.factories.user import HASHER, UserFactory


class ApiKeyFactory(BaseFactory):
    class Meta:
        model = ApiKey

    class Params:
        user = factory.SubFactory(UserFactory)
        secret = "s3cret-value"

    user_id = factory.SelfAttribute("user.id")
    name = factory.Sequence(lambda n: f"key {n}")
    key_prefix = factory.Sequence(lambda n: f"ak_{n:08x}")
    secret_hash = factory.LazyAttribute(lambda o: HASHER.hash(o.secret))
    expires_at = None
    created_at = factory.LazyFunction(lambda: datetime.now(UTC))
