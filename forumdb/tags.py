"""Tags that can be attached to posts."""

from __future__ import annotations

from typing import Optional

from .db import Database
from .records import Tag


def create_tag(db: Database, name: str) -> int:
    """Insert a tag unless it exists; return the new id, or 0 if nothing was inserted."""
    cursor = db.execute("INSERT IGNORE INTO tag (name) VALUES (?)", name)
    if not cursor.rowcount:
        return 0
    return int(cursor.lastrowid or 0)


def create_tag_if_not_exists(db: Database, name: str) -> None:
    """Insert a tag, doing nothing if it already exists."""
    db.execute("INSERT IGNORE INTO tag (name) VALUES (?)", name)


def get_tag_by_name(db: Database, name: str) -> Optional[Tag]:
    """Return the tag with this name, or None."""
    row = db.query_one("SELECT id, name FROM tag WHERE name = ?", name)
    return Tag(int(row[0]), row[1]) if row is not None else None


def get_all_tags(db: Database) -> list[Tag]:
    """Return every tag."""
    return [Tag(int(tag_id), name) for tag_id, name in db.query_all("SELECT id, name FROM tag")]