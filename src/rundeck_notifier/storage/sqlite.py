"""SQLite implementations of repository interfaces.

All repositories use SQLAlchemy 2.0-style queries (select() + session.execute()).
Each repository takes a Session in its constructor.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from rundeck_notifier.exceptions import DuplicateBadgeError
from rundeck_notifier.storage.repositories import BadgeRepository, ConfigRepository
from rundeck_notifier.storage.schema import ExecutionBadgeRow, RundeckConfigRow

_CONFIG_ROW_ID = 1


class SqliteConfigRepository(ConfigRepository):
    """SQLite implementation of the configuration repository.

    Single row: replace() overwrites every column in one flush.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self) -> RundeckConfigRow | None:
        stmt = select(RundeckConfigRow).where(RundeckConfigRow.id == _CONFIG_ROW_ID)
        return self._session.execute(stmt).scalar_one_or_none()

    def replace(self, row: RundeckConfigRow) -> None:
        row.id = _CONFIG_ROW_ID
        self._session.merge(row)
        self._session.flush()


class SqliteBadgeRepository(BadgeRepository):
    """SQLite implementation of the badge repository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, project: str, build_number: int) -> ExecutionBadgeRow | None:
        stmt = select(ExecutionBadgeRow).where(
            ExecutionBadgeRow.project == project,
            ExecutionBadgeRow.build_number == build_number,
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def save(self, badge: ExecutionBadgeRow) -> None:
        if self.get(badge.project, badge.build_number) is not None:
            raise DuplicateBadgeError(badge.project, badge.build_number)
        self._session.add(badge)
        self._session.flush()

    def list(self, project: str | None = None) -> Sequence[ExecutionBadgeRow]:
        stmt = select(ExecutionBadgeRow)
        if project is not None:
            stmt = stmt.where(ExecutionBadgeRow.project == project)
        stmt = stmt.order_by(
            ExecutionBadgeRow.created_at.desc(), ExecutionBadgeRow.id.desc()
        )
        return list(self._session.execute(stmt).scalars().all())
