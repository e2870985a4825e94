"""ApiKeyService: reveal-once secrets, owner scoping and verification."""

from __future__ import annotations

import re
from datetime import timedelta

import pytest
from vault_api.models import ApiKey
from vault_api.services._shared.errors import UserDeletedError, ValidationFailedError
from vault_api.services.api_keys import ApiKeyCreateIn, ApiKeyService

from tests.factories.user import HASHER, UserFactory
from tests.helpers.utils import not_raises


@pytest.fixture()
def service(session, clock) -> ApiKeyService:
    return ApiKeyService(hasher=HASHER, clock=clock)


@pytest.fixture()
def owner(session):
    return UserFactory()


class TestCreate:
    def test_secret_is_revealed_once_and_only_hashed(self, service, owner, session):
        created = service.create(ApiKeyCreateIn(user_id=owner.id, name="  ci  "))

        assert re.fullmatch(r"ak_[0-9a-f]{8}", created.key.key_prefix)
        assert created.key.name == "ci"
        assert len(created.secret) >= 43

        row = session.get(ApiKey, created.key.id)
        assert row.secret_hash != created.secret
        assert created.secret not in row.secret_hash
        assert HASHER.verify(created.secret, row.secret_hash)

    def test_listing_never_carries_the_secret(self, service, owner):
        service.create(ApiKeyCreateIn(user_id=owner.id, name="ci"))
        (listed,) = service.list(owner.id)
        assert not hasattr(listed, "secret")
        assert not hasattr(listed, "secret_hash")

    @pytest.mark.parametrize("name", ["", "   ", "x" * 101])
    def test_invalid_name(self, service, owner, name):
        with pytest.raises(ValidationFailedError):
            service.create(ApiKeyCreateIn(user_id=owner.id, name=name))

    def test_expiry_must_be_in_the_future(self, service, owner, clock):
        with pytest.raises(ValidationFailedError):
            service.create(ApiKeyCreateIn(user_id=owner.id, name="old", expires_at=clock.now()))

    def test_deleted_owner(self, service, session):
        with pytest.raises(UserDeletedError):
            service.create(ApiKeyCreateIn(user_id="gone", name="ci"))


class TestListAndDelete:
    def test_list_in_creation_order(self, service, owner, clock):
        service.create(ApiKeyCreateIn(user_id=owner.id, name="first"))
        clock.advance(timedelta(seconds=1))
        service.create(ApiKeyCreateIn(user_id=owner.id, name="second"))
        assert [k.name for k in service.list(owner.id)] == ["first", "second"]

    def test_list_is_owner_scoped(self, service, owner):
        other = UserFactory()
        service.create(ApiKeyCreateIn(user_id=other.id, name="theirs"))
        assert service.list(owner.id) == []

    def test_delete_is_idempotent(self, service, owner):
        key = service.create(ApiKeyCreateIn(user_id=owner.id, name="ci")).key
        with not_raises(Exception):
            service.delete(owner.id, key.id)
            service.delete(owner.id, key.id)
            service.delete(owner.id, "unknown")
        assert service.list(owner.id) == []

    def test_delete_ignores_foreign_keys(self, service, owner):
        other = UserFactory()
        theirs = service.create(ApiKeyCreateIn(user_id=other.id, name="theirs")).key
        service.delete(owner.id, theirs.id)
        assert [k.id for k in service.list(other.id)] == [theirs.id]


class TestVerify:
    def test_matching_secret(self, service, owner):
        created = service.create(ApiKeyCreateIn(user_id=owner.id, name="ci"))
        verified = service.verify(created.key.key_prefix, created.secret)
        assert verified is not None
        assert verified.id == created.key.id

    def test_wrong_secret(self, service, owner):
        created = service.create(ApiKeyCreateIn(user_id=owner.id, name="ci"))
        assert service.verify(created.key.key_prefix, created.secret + "x") is None

    def test_unknown_prefix(self, service):
        assert service.verify("ak_00000000", "whatever") is None

    def test_expired_key(self, service, owner, clock):
        created = service.create(
            ApiKeyCreateIn(user_id=owner.id, name="ci", expires_at=clock.now() + timedelta(hours=1))
        )
        clock.advance(timedelta(hours=1))
        assert service.verify(created.key.key_prefix, created.secret) is None
