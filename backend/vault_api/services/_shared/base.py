"""Service base class: Unit of Work factories and the failure guard."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from vault_api.services._shared.errors import InternalServiceError, ServiceError
from vault_api.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContext:
    """
    Request-scoped data a service may log.

    :param actor_id: Subject of the verified access token, if any.
    :param request_id: Correlation id of the HTTP request.
    """

    actor_id: str | None = None
    request_id: str | None = None


class BaseService:
    """
    Common plumbing for application services.

    Services never touch ``db.session`` directly: they open a Unit of Work
    (:meth:`rw_uow`, :meth:`ro_uow`) or call a store port. They keep no
    mutable state, so one instance may serve concurrent callers.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Open a read-only Unit of Work.

        :param isolation: Isolation level; defaults to :attr:`DEFAULT_READ_ISOLATION`.
        :param enforce_db_readonly: Ask the database for a ``READ ONLY``
            transaction where supported.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    @contextmanager
    def guard(self, operation: str) -> Iterator[None]:
        """
        Let :class:`ServiceError` through and wrap anything else.

        Unexpected exceptions (driver errors, timeouts, bugs) are logged with
        their traceback and re-raised as :class:`InternalServiceError`, with
        the original chained as ``__cause__``. Nothing is retried.

        :param operation: Name used in the log record.
        :raises InternalServiceError: On any non-service failure.
        """
        try:
            yield
        except ServiceError:
            raise
        except Exception as exc:
            log.exception(
                "%s failed unexpectedly",
                operation,
                extra={
                    "operation": operation,
                    "user_id": self.ctx.actor_id,
                    "request_id": self.ctx.request_id,
                },
            )
            raise InternalServiceError() from exc
