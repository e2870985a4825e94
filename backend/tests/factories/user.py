"""Factory Boy definition for :class:`vault_api.models.user.User`."""

from __future__ import annotations

import factory
from vault_api.infra.crypto.bcrypt_hasher import BcryptPasswordHasher
from vault_api.models.user import ROLE_ADMIN, ROLE_MEMBER, User

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"

# Same cost as the testing config so API logins verify these hashes quickly
HASHER = BcryptPasswordHasher(rounds=4)


class UserFactory(BaseFactory):
    """
    Build persisted :class:`vault_api.models.user.User` instances.

    Notes
    -----
    - ``password`` is a factory parameter: the stored column only ever
      holds its bcrypt hash.
    - Defaults to ``member``; use ``UserFactory(admin=True)`` for the single
      admin row.
    """

    class Meta:
        model = User

    class Params:
        admin = factory.Trait(role=ROLE_ADMIN)
        password = DEFAULT_PASSWORD

    username = factory.Sequence(lambda n: f"user{n}")
    role = ROLE_MEMBER
    password_hash = factory.LazyAttribute(lambda o: HASHER.hash(o.password))
