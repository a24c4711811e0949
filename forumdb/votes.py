"""Votes on posts and comments."""

from __future__ import annotations

from typing import Optional

from .db import Database, DatabaseError
from .records import Vote


def get_vote_by_id(db: Database, vote_id: int) -> Optional[Vote]:
    """Return the vote with the given id, or None."""
    try:
        row = db.query_one(
            "SELECT id, user_id, post_id, comment_id, value, created_at FROM vote WHERE id = ?",
            vote_id,
        )
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the vote: {exc}") from exc
    return Vote(*row) if row is not None else None


def create_vote(
    db: Database,
    user_id: int,
    value: int,
    post_id: Optional[int] = None,
    comment_id: Optional[int] = None,
) -> None:
    """Record a vote on a post or, failing that, on a comment.

    The new id is one more than the largest post id.
    """
    try:
        new_id = db.get_max_id("post") + 1
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the maximum id: {exc}") from exc
    if post_id is not None:
        column, target = "post_id", post_id
    elif comment_id is not None:
        column, target = "comment_id", comment_id
    else:
        raise ValueError("either post_id or comment_id must be given")
    try:
        db.execute(
            f"INSERT INTO vote (id, user_id, {column}, value, created_at) "
            "VALUES (?, ?, ?, ?, NOW())",
            new_id,
            user_id,
            target,
            value,
        )
    except DatabaseError as exc:
        raise DatabaseError(f"cannot create the vote: {exc}") from exc