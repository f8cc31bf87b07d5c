"""
Computer store backed by SQLAlchemy/SQLite.

The database is the only source of truth; nothing is mirrored in memory.
Every mutation runs in its own transaction that commits when the block
finishes and rolls back if anything inside it raises, store errors included.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from db import create_sqlite_engine, init_db, make_session_factory
from domain.errors import (
    AlreadyExistsError,
    NotFoundError,
    NotUniqueError,
    StoreCloseError,
    StoreCreateError,
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from domain.models import Computer, KeyKind
from repositories.base import (
    ComputerStore,
    KeyArg,
    require_identifying_key,
    require_multi_read_key,
    validate_assignee,
    validate_computer,
)
from repositories.models import ComputerORM

logger = logging.getLogger(__name__)


def _computer_from_orm(orm: ComputerORM) -> Computer:
    return Computer(
        mac=orm.MAC,
        name=orm.Name,
        ip=orm.IP,
        assignee=orm.Assignee or "",
        description=orm.Description or "",
    )


def _key_column(kind: KeyKind):
    return getattr(ComputerORM, kind.value)


def _unassigned_filter():
    return or_(ComputerORM.Assignee == "", ComputerORM.Assignee.is_(None))


class SqlComputerStore(ComputerStore):
    """CRUD operations on the `computers` table."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._closed = False
        try:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_sqlite_engine(db_path)
            init_db(self._engine)
        except (OSError, SQLAlchemyError) as exc:
            logger.error("Error creating table in SQL database %s: %s", db_path, exc)
            raise StoreCreateError(f"Error creating database {db_path}") from exc
        self._sessions = make_session_factory(self._engine)

    @contextmanager
    def _reading(self) -> Iterator[Session]:
        try:
            with self._sessions() as session:
                yield session
        except StoreError:
            raise
        except SQLAlchemyError as exc:
            logger.error("Error reading database: %s", exc)
            raise StoreReadError("Error reading from database") from exc

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        try:
            with self._sessions.begin() as session:
                yield session
        except StoreError:
            raise
        except SQLAlchemyError as exc:
            logger.error("Error writing to database, rolled back: %s", exc)
            raise StoreWriteError("Error writing to database") from exc

    def _single_row(self, query: Query, kind: KeyKind, value: str, action: str) -> ComputerORM:
        rows = query.filter(_key_column(kind) == value).limit(2).all()
        if not rows:
            logger.warning("Error %s item with %s=%s: Item not found", action, kind.value, value)
            raise NotFoundError(f"No item with {kind.value}={value}")
        if len(rows) > 1:
            logger.warning(
                "Error %s item with %s=%s: Multiple items found", action, kind.value, value
            )
            raise NotUniqueError(f"{kind.value}={value} matches more than one item")
        return rows[0]

    def read(self, key: KeyArg, value: str) -> Computer:
        kind = require_identifying_key(key, "fetching")
        with self._reading() as session:
            row = self._single_row(session.query(ComputerORM), kind, value, "fetching")
            return _computer_from_orm(row)

    def read_all(self, key: KeyArg, value: str = "") -> List[Computer]:
        kind = require_multi_read_key(key)
        with self._reading() as session:
            query = session.query(ComputerORM)
            if kind == KeyKind.NOT_ASSIGNED or (kind == KeyKind.ASSIGNEE and value == ""):
                query = query.filter(_unassigned_filter())
            elif kind == KeyKind.ASSIGNEE:
                query = query.filter(ComputerORM.Assignee == value)
            computers = [_computer_from_orm(row) for row in query.all()]

        if not computers:
            logger.warning("Error fetching items with %s=%s: No items found", kind.value, value)
            raise NotFoundError(f"No items with {kind.value}={value}")
        return computers

    def add(self, computer: Computer) -> None:
        validate_computer(computer)
        with self._transaction() as session:
            clash = (
                session.query(ComputerORM)
                .filter(
                    or_(
                        ComputerORM.MAC == computer.mac,
                        ComputerORM.Name == computer.name,
                        ComputerORM.IP == computer.ip,
                    )
                )
                .first()
            )
            if clash is not None:
                logger.warning("Error adding item: Item %s already exists", computer.mac)
                raise AlreadyExistsError("Item already exists")
            session.add(
                ComputerORM(
                    MAC=computer.mac,
                    Name=computer.name,
                    IP=computer.ip,
                    Assignee=computer.assignee,
                    Description=computer.description,
                )
            )
            try:
                session.flush()
            except IntegrityError as exc:
                raise AlreadyExistsError("Item already exists") from exc

    def delete(self, key: KeyArg, value: str) -> None:
        kind = require_identifying_key(key, "deleting")
        with self._transaction() as session:
            row = self._single_row(session.query(ComputerORM), kind, value, "deleting")
            session.delete(row)

    def assign(self, key: KeyArg, value: str, assignee: str) -> None:
        validate_assignee(assignee)
        kind = require_identifying_key(key, "assigning")
        with self._transaction() as session:
            row = self._single_row(session.query(ComputerORM), kind, value, "assigning")
            row.Assignee = assignee

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._engine.dispose()
        except SQLAlchemyError as exc:
            logger.error("Error closing database %s: %s", self.db_path, exc)
            raise StoreCloseError(f"Error closing database {self.db_path}") from exc
