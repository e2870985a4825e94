"""Unit tests for :mod:`vault_api.repositories.api_key`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from vault_api.repositories.api_key import ApiKeyRepository

from tests.factories.api_key import ApiKeyFactory
from tests.factories.user import UserFactory


class TestApiKeyRepository:
    def test_get_owned(self, session):
        key = ApiKeyFactory()
        stranger = UserFactory()
        repo = ApiKeyRepository()

        assert repo.get_owned(key.id, user_id=key.user_id).id == key.id
        assert repo.get_owned(key.id, user_id=stranger.id) is None

    def test_get_by_prefix(self, session):
        key = ApiKeyFactory()
        repo = ApiKeyRepository()

        assert repo.get_by_prefix(key.key_prefix).id == key.id
        assert repo.get_by_prefix("ak_missing") is None

    def test_list_for_user_in_creation_order(self, session):
        user = UserFactory()
        base = datetime(2024, 1, 1, tzinfo=UTC)
        second = ApiKeyFactory(user=user, created_at=base + timedelta(minutes=1))
        first = ApiKeyFactory(user=user, created_at=base)
        ApiKeyFactory()
        repo = ApiKeyRepository()

        assert [k.id for k in repo.list_for_user(user.id)] == [first.id, second.id]

    def test_delete_for_user(self, session):
        user = UserFactory()
        ApiKeyFactory.create_batch(3, user=user)
        repo = ApiKeyRepository()

        assert repo.delete_for_user(user.id) == 3
        assert repo.list_for_user(user.id) == []
