"""Forum members: registration, authentication and profile edits."""

from __future__ import annotations

import hashlib
import secrets
from typing import Optional

from .db import Database, DatabaseError
from .records import User

_USER_COLUMNS = "id, username, email, passwd_hash, salt, created_at"
_SALT_BYTES = 16


class AuthenticationError(Exception):
    """Raised when a user cannot be logged in."""


def hash_password(password: str, salt: str) -> str:
    """Return the hex SHA-256 digest of the password followed by the salt."""
    return hashlib.sha256((password + salt).encode("utf-8")).hexdigest()


def _new_salt() -> str:
    return secrets.token_hex(_SALT_BYTES)


def _find_user(db: Database, column: str, value: object) -> Optional[User]:
    row = db.query_one(f"SELECT {_USER_COLUMNS} FROM user WHERE {column} = ?", value)
    return User(*row) if row is not None else None


def get_user_by_id(db: Database, user_id: int) -> User:
    """Return the user with the given id; raise DatabaseError if there is none."""
    user = _find_user(db, "id", user_id)
    if user is None:
        raise DatabaseError(f"no user with id {user_id}")
    return user


def check_username_exists(db: Database, username: str) -> bool:
    """Tell whether a user already has this username."""
    try:
        row = db.query_one("SELECT COUNT(*) FROM user WHERE username = ?", username)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot check whether the username exists: {exc}") from exc
    return row is not None and int(row[0]) > 0


def create_user(db: Database, username: str, email: str, password: str) -> None:
    """Register a user with a freshly salted password hash."""
    if check_username_exists(db, username):
        raise ValueError(f"the username {username} already exists")
    try:
        new_id = db.get_max_id("user") + 1
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the maximum id: {exc}") from exc
    salt = _new_salt()
    db.execute(
        "INSERT INTO user (id, username, email, passwd_hash, salt, created_at) "
        "VALUES (?, ?, ?, ?, ?, NOW())",
        new_id,
        username,
        email,
        hash_password(password, salt),
        salt,
    )


def check_password(db: Database, user_id: int, password: str) -> bool:
    """Tell whether the password matches the stored hash of the user."""
    user = get_user_by_id(db, user_id)
    return hash_password(password, user.salt) == user.passwd_hash


def connect_user(db: Database, username: str, password: str) -> User:
    """Return the user matching the credentials; raise AuthenticationError otherwise."""
    user = _find_user(db, "username", username)
    if user is None:
        raise AuthenticationError("user not found")
    try:
        valid = check_password(db, user.id, password)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot check the password: {exc}") from exc
    if not valid:
        raise AuthenticationError("incorrect password")
    return user


def edit_password(db: Database, user_id: int, new_password: str) -> None:
    """Replace a user's password, drawing a new salt."""
    try:
        user = get_user_by_id(db, user_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the user: {exc}") from exc
    salt = _new_salt()
    db.execute(
        "UPDATE user SET passwd_hash = ?, salt = ? WHERE id = ?",
        hash_password(new_password, salt),
        salt,
        user.id,
    )


def edit_email(db: Database, user_id: int, new_email: str) -> None:
    """Change a user's e-mail address."""
    try:
        db.execute("UPDATE user SET email = ? WHERE id = ?", new_email, user_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot update the email: {exc}") from exc


def edit_username(db: Database, user_id: int, new_username: str) -> None:
    """Change a user's username."""
    try:
        db.execute("UPDATE user SET username = ? WHERE id = ?", new_username, user_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot update the username: {exc}") from exc