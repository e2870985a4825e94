import pytest
from sqlalchemy import text
from vault_api.models.user import User
from vault_api.uow import (
    SQLAlchemyReadOnlyUnitOfWork as ROuow,
)
from vault_api.uow import (
    SQLAlchemyUnitOfWork as RWuow,
)
from vault_api.uow.sqlalchemy_uow import leading_keyword

from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, app, db, session):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            user = UserFactory.build()  # not persisted
            uow.session.add(user)
            uow.session.flush()

    def test_blocks_core_dml(self, app, db, session):
        """
        Ensure that raw SQL DML is blocked inside the RO UoW.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(
                text("DELETE FROM refresh_sessions WHERE token = :token"), {"token": "t"}
            )

    def test_allows_reads(self, app, db, session):
        """
        Read operations should work normally within RO UoW.
        """
        with RWuow() as uow:
            uow.users.add(UserFactory.build())

        with ROuow() as uow:
            assert uow.users.count() >= 1

    def test_disallows_commit(self, app, db, session):
        """
        RO UoW must reject commit() by design.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_always_rolls_back_changes(self, app, db, session):
        """
        Any attempted modifications must not persist after RO UoW exits.
        """
        with RWuow() as uow:
            user = UserFactory.build(username="original")
            uow.users.add(user)
            user_id = user.id

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.users.get(user_id)
            u.username = "mutated-in-ro"
            uow.session.flush()

        with RWuow() as uow:
            persisted = uow.session.get(User, user_id)
            assert persisted.username == "original"

    def test_flavours_advertise_writability(self):
        assert RWuow.writable is True
        assert ROuow.writable is False


@pytest.mark.parametrize(
    ("statement", "keyword"),
    [
        ("  DELETE FROM users", "delete"),
        ("\nInsert into api_keys values (1)", "insert"),
        ("SELECT 1", "select"),
        ("", ""),
        (None, ""),
    ],
)
def test_leading_keyword(statement, keyword):
    assert leading_keyword(statement) == keyword
