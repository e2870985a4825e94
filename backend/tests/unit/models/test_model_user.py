"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from vault_api.models.user import ROLE_ADMIN, ROLE_MEMBER, User


def _user(username: str, role: str = ROLE_MEMBER) -> User:
    return User(username=username, password_hash="$2b$04$hash", role=role)


class TestUser:
    def test_username_is_stripped_not_lowercased(self, session):
        u = _user("  Alice ")
        session.add(u)
        session.commit()
        assert u.username == "Alice"
        assert len(u.id) == 36

    def test_username_unique(self, session):
        session.add(_user("bob"))
        session.commit()

        session.add(_user("bob"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_usernames_differing_in_case_coexist(self, session):
        session.add_all([_user("carol"), _user("Carol")])
        session.commit()
        assert session.query(User).filter(User.username.in_(["carol", "Carol"])).count() == 2

    def test_single_admin(self, session):
        session.add(_user("root", ROLE_ADMIN))
        session.commit()

        session.add(_user("root2", ROLE_ADMIN))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_unknown_role_rejected(self, session):
        session.add(_user("dave", "owner"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_basic_validations(self):
        with pytest.raises(ValueError):
            User(username=" ", password_hash="x")
        with pytest.raises(ValueError):
            _user("x")._normalize_username("username", "")

    def test_no_secret_fields(self):
        u = _user("erin")
        assert not hasattr(u, "password")
        assert not hasattr(u, "email")
