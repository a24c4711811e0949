"""Database connection handling and generic table helpers."""

from __future__ import annotations

import logging
import os
import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional

import pymysql

logger = logging.getLogger(__name__)

_DIALECTS = frozenset({"mysql", "sqlite"})
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_INSERT_IGNORE = re.compile(r"\bINSERT\s+IGNORE\b", re.IGNORECASE)


class DatabaseError(Exception):
    """Raised when a database operation fails."""


def _check_identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise ValueError(f"invalid SQL identifier: {name!r}")
    return name


def _now_text() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class Database:
    """A DB-API connection with the forum's query conventions.

    Queries use ``?`` placeholders and MySQL-flavoured SQL; they are adapted
    to the connection's dialect before being run.
    """

    def __init__(self, connection: Any, dialect: str) -> None:
        if dialect not in _DIALECTS:
            raise ValueError(f"unsupported dialect: {dialect!r}")
        self._connection = connection
        self.dialect = dialect
        self._in_transaction = False
        driver_error = getattr(connection, "Error", None)
        if isinstance(driver_error, type) and issubclass(driver_error, BaseException):
            self._driver_error: type[BaseException] = driver_error
        else:
            self._driver_error = Exception
        if dialect == "sqlite":
            connection.create_function("NOW", 0, _now_text)

    def _prepare(self, query: str) -> str:
        if self.dialect == "mysql":
            return query.replace("%", "%%").replace("?", "%s")
        return _INSERT_IGNORE.sub("INSERT OR IGNORE", query)

    def _run(self, query: str, args: tuple) -> Any:
        cursor = self._connection.cursor()
        try:
            cursor.execute(self._prepare(query), args)
        except self._driver_error as exc:
            raise DatabaseError(str(exc)) from exc
        return cursor

    def execute(self, query: str, *args: Any) -> Any:
        """Run a statement and return its cursor (``rowcount``, ``lastrowid``)."""
        cursor = self._run(query, args)
        if not self._in_transaction:
            try:
                self._connection.commit()
            except self._driver_error as exc:
                raise DatabaseError(str(exc)) from exc
        return cursor

    def query_one(self, query: str, *args: Any) -> Optional[tuple]:
        """Return the first row of a query, or None when there is none."""
        row = self._run(query, args).fetchone()
        return tuple(row) if row is not None else None

    def query_all(self, query: str, *args: Any) -> list[tuple]:
        """Return every row of a query."""
        return [tuple(row) for row in self._run(query, args).fetchall()]

    @contextmanager
    def transaction(self) -> Iterator["Database"]:
        """Group statements; commit on success, roll back on any exception."""
        if self._in_transaction:
            yield self
            return
        self._in_transaction = True
        try:
            if self.dialect == "mysql":
                self._connection.begin()
            yield self
        except BaseException:
            self._connection.rollback()
            raise
        else:
            try:
                self._connection.commit()
            except self._driver_error as exc:
                raise DatabaseError(str(exc)) from exc
        finally:
            self._in_transaction = False

    def get_max_id(self, table_name: str) -> int:
        """Return the largest id of a table, 0 when the table is empty."""
        table = _check_identifier(table_name)
        try:
            row = self.query_one(f"SELECT MAX(id) FROM {table}")
        except DatabaseError as exc:
            raise DatabaseError(f"cannot fetch the max id: {exc}") from exc
        if row is None or row[0] is None:
            return 0
        return int(row[0])

    def get_id_by_something(self, table_name: str, column_name: str, value: Any) -> int:
        """Return the id of the row whose column equals value, 0 if none."""
        table = _check_identifier(table_name)
        column = _check_identifier(column_name)
        try:
            row = self.query_one(f"SELECT id FROM {table} WHERE {column} = ?", value)
        except DatabaseError as exc:
            raise DatabaseError(f"cannot fetch the id: {exc}") from exc
        return 0 if row is None else int(row[0])

    def get_all_ids_by_something(
        self, table_name: str, column_name: str, value: Any
    ) -> list[int]:
        """Return the ids of every row whose column equals value."""
        table = _check_identifier(table_name)
        column = _check_identifier(column_name)
        try:
            rows = self.query_all(f"SELECT id FROM {table} WHERE {column} = ?", value)
        except DatabaseError as exc:
            raise DatabaseError(f"cannot fetch the ids: {exc}") from exc
        return [int(row[0]) for row in rows]

    def edit_something_by_id(
        self, table_name: str, column_name: str, value: Any, row_id: int
    ) -> None:
        """Set one column of the row with the given id."""
        table = _check_identifier(table_name)
        column = _check_identifier(column_name)
        try:
            self.execute(f"UPDATE {table} SET {column} = ? WHERE id = ?", value, row_id)
        except DatabaseError as exc:
            raise DatabaseError(f"cannot update {table}: {exc}") from exc

    def delete_something_by_id(self, table_name: str, row_id: int) -> None:
        """Delete the row with the given id; fail if no row was removed."""
        table = _check_identifier(table_name)
        try:
            cursor = self.execute(f"DELETE FROM {table} WHERE id = ?", row_id)
        except DatabaseError as exc:
            raise DatabaseError(f"cannot delete from {table}: {exc}") from exc
        if cursor.rowcount == 0:
            raise DatabaseError(f"no row with id {row_id} in table {table}")

    def get_all_ids(self, table_name: str) -> list[int]:
        """Return the id of every row of a table."""
        table = _check_identifier(table_name)
        try:
            rows = self.query_all(f"SELECT id FROM {table}")
        except DatabaseError as exc:
            raise DatabaseError(f"cannot fetch the ids: {exc}") from exc
        return [int(row[0]) for row in rows]

    def get_count_by_something(self, table_name: str, column_name: str, value: Any) -> int:
        """Count the rows whose column equals value."""
        table = _check_identifier(table_name)
        column = _check_identifier(column_name)
        try:
            row = self.query_one(f"SELECT COUNT(*) FROM {table} WHERE {column} = ?", value)
        except DatabaseError as exc:
            raise DatabaseError(f"cannot fetch the count: {exc}") from exc
        return int(row[0]) if row is not None else 0

    def close(self) -> None:
        """Close the connection and forget it if it is the shared one."""
        global _context
        self._connection.close()
        if _context is self:
            _context = None


_context: Optional[Database] = None


def get_env_with_default(key: str, default: str) -> str:
    """Return an environment variable, or default when unset or empty."""
    return os.environ.get(key) or default


def init_db() -> Database:
    """Open (once) the shared MySQL connection configured by environment."""
    global _context
    if _context is not None:
        logger.info("database connection already initialised")
        return _context

    user = get_env_with_default("DB_USER", "root")
    host = get_env_with_default("DB_HOST", "localhost")
    port = get_env_with_default("DB_PORT", "3306")
    name = get_env_with_default("DB_NAME", "bdd_forum")

    if not user or not name:
        raise DatabaseError("DB_USER and DB_NAME must be set")
    try:
        port_number = int(port)
    except ValueError as exc:
        raise DatabaseError(f"invalid DB_PORT: {port!r}") from exc

    password = ""
    try:
        connection = pymysql.connect(
            host=host,
            port=port_number,
            user=user,
            password=password,
            database=name,
            autocommit=True,
        )
    except pymysql.MySQLError as exc:
        raise DatabaseError(f"cannot open the database: {exc}") from exc
    try:
        connection.ping(reconnect=False)
    except pymysql.MySQLError as exc:
        raise DatabaseError(f"cannot connect to the database: {exc}") from exc

    _context = Database(connection, "mysql")
    logger.info("connected to the database")
    return _context