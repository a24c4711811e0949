"""Comments on posts."""

from __future__ import annotations

from typing import Optional

from .db import Database, DatabaseError
from .records import Comment


def get_comment_by_id(db: Database, comment_id: int) -> Optional[Comment]:
    """Return the comment with the given id, or None."""
    try:
        row = db.query_one(
            "SELECT id, content, user_id, post_id, parent_comment_id, created_at "
            "FROM comment WHERE id = ?",
            comment_id,
        )
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the comment: {exc}") from exc
    return Comment(*row) if row is not None else None


def create_comment(
    db: Database,
    content: str,
    post_id: int,
    user_id: int,
    parent_comment_id: Optional[int] = None,
) -> None:
    """Add a comment to a post, optionally as a reply to another comment.

    The new id is one more than the largest post id.
    """
    try:
        new_id = db.get_max_id("post") + 1
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the maximum id: {exc}") from exc
    try:
        if parent_comment_id is not None:
            db.execute(
                "INSERT INTO comment (id, content, user_id, post_id, parent_comment_id, "
                "created_at) VALUES (?, ?, ?, ?, ?, NOW())",
                new_id,
                content,
                user_id,
                post_id,
                parent_comment_id,
            )
        else:
            db.execute(
                "INSERT INTO comment (id, content, user_id, post_id, created_at) "
                "VALUES (?, ?, ?, ?, NOW())",
                new_id,
                content,
                user_id,
                post_id,
            )
    except DatabaseError as exc:
        raise DatabaseError(f"cannot create the comment: {exc}") from exc