"""NotifierStore -- persisted Rundeck configuration and execution badges.

Replaces a process-wide mutable singleton with an explicit handle:
open it, load or save the configuration, record badges, close it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from rundeck_notifier.models.build import Build, ExecutionBadge
from rundeck_notifier.models.config import RundeckConfig
from rundeck_notifier.storage.engine import (
    create_notifier_engine,
    create_session_factory,
    init_db,
)
from rundeck_notifier.storage.schema import ExecutionBadgeRow, RundeckConfigRow
from rundeck_notifier.storage.sqlite import SqliteBadgeRepository, SqliteConfigRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeRecord:
    """A persisted execution badge."""

    project: str
    build_number: int
    execution_url: str
    created_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class NotifierStore:
    """Database-backed store for notifier state.

    Usage::

        store = NotifierStore.open(".rundeck-notifier.db")
        try:
            store.save_config(RundeckConfig(url=..., login=..., password=...))
            config = store.load_config()
        finally:
            store.close()
    """

    def __init__(self, engine: Engine, session: Session) -> None:
        self._engine = engine
        self._session = session
        self._configs = SqliteConfigRepository(session)
        self._badges = SqliteBadgeRepository(session)

    @classmethod
    def open(cls, path: str = ":memory:", *, url: str | None = None) -> NotifierStore:
        engine = create_notifier_engine(path, url=url)
        init_db(engine)
        session = create_session_factory(engine)()
        return cls(engine, session)

    def close(self) -> None:
        self._session.close()
        self._engine.dispose()

    def __enter__(self) -> NotifierStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Rundeck configuration
    # ------------------------------------------------------------------

    def load_config(self) -> RundeckConfig | None:
        """Return the saved configuration, or None if never configured."""
        row = self._configs.get()
        if row is None:
            return None
        return RundeckConfig(
            url=row.url,
            login=row.login,
            password=row.password,
            timeout=row.timeout,
        )

    def save_config(self, config: RundeckConfig) -> None:
        """Replace the saved configuration in a single transaction."""
        try:
            self._configs.replace(
                RundeckConfigRow(
                    url=config.url,
                    login=config.login,
                    password=config.password,
                    timeout=config.timeout,
                    updated_at=_utcnow(),
                )
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        logger.info("Saved Rundeck configuration for %s", config.url)

    # ------------------------------------------------------------------
    # Execution badges
    # ------------------------------------------------------------------

    def record_badge(self, build: Build, badge: ExecutionBadge) -> BadgeRecord:
        """Persist the badge of *build*.

        Raises:
            DuplicateBadgeError: If the build already has a stored badge.
        """
        row = ExecutionBadgeRow(
            project=build.project,
            build_number=build.number,
            execution_url=badge.execution_url,
            created_at=_utcnow(),
        )
        try:
            self._badges.save(row)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        return _to_record(row)

    def get_badge(self, project: str, build_number: int) -> BadgeRecord | None:
        row = self._badges.get(project, build_number)
        return _to_record(row) if row is not None else None

    def list_badges(self, project: str | None = None) -> list[BadgeRecord]:
        return [_to_record(row) for row in self._badges.list(project)]


def _to_record(row: ExecutionBadgeRow) -> BadgeRecord:
    return BadgeRecord(
        project=row.project,
        build_number=row.build_number,
        execution_url=row.execution_url,
        created_at=row.created_at,
    )
