"""UserService: profile and export for the authenticated subject."""

from __future__ import annotations

import pytest
from vault_api.infra.sqlalchemy.user_store import SqlAlchemyUserStore
from vault_api.services._shared.errors import InternalServiceError, UserDeletedError
from vault_api.services.users import UserExportOut, UserService

from tests.factories.user import HASHER, UserFactory


@pytest.fixture()
def memory_service(memory_users) -> UserService:
    return UserService(users=memory_users)


class TestInMemory:
    def test_get_current_user(self, memory_service, memory_users, clock):
        record = memory_users.create(username="alice", password_hash="x")
        out = memory_service.get_current_user(record.id)
        assert out.id == record.id
        assert out.username == "alice"
        assert out.role == "admin"
        assert out.created_at == clock.now()

    def test_export_shape_is_versioned_and_minimal(self, memory_service, memory_users):
        record = memory_users.create(username="alice", password_hash="x", password_hint="h")
        out = memory_service.export_user_data(record.id)
        assert isinstance(out, UserExportOut)
        assert out.as_dict() == {"version": 1, "user": {"id": record.id, "username": "alice"}}

    @pytest.mark.parametrize("operation", ["get_current_user", "export_user_data"])
    def test_deleted_user(self, memory_service, memory_users, operation):
        record = memory_users.create(username="alice", password_hash="x")
        memory_users.delete(record.id)
        with pytest.raises(UserDeletedError):
            getattr(memory_service, operation)(record.id)

    def test_store_failure_is_internal(self, memory_service, memory_users, monkeypatch):
        def boom(user_id):
            raise OSError("disk")

        monkeypatch.setattr(memory_users, "find_by_id", boom)
        with pytest.raises(InternalServiceError):
            memory_service.get_current_user("any")


class TestSqlAlchemy:
    def test_profile_from_database(self, session):
        user = UserFactory(username="carol")
        out = UserService(users=SqlAlchemyUserStore(HASHER)).get_current_user(user.id)
        assert out.username == "carol"
        assert out.role == "member"
        assert out.created_at.tzinfo is not None

    def test_unknown_id(self, session):
        with pytest.raises(UserDeletedError):
            UserService(users=SqlAlchemyUserStore(HASHER)).export_user_data("missing")
