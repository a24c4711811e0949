"""Posts: creation, edits, tagging, search and ordering."""

from __future__ import annotations

from typing import Optional, Sequence

from .db import Database, DatabaseError
from .records import Post

_POST_COLUMNS = "id, title, content, user_id, created_at"


def get_post_by_id(db: Database, post_id: int) -> Optional[Post]:
    """Return the post with the given id, or None."""
    try:
        row = db.query_one(f"SELECT {_POST_COLUMNS} FROM post WHERE id = ?", post_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the post: {exc}") from exc
    return Post(*row) if row is not None else None


def create_post(db: Database, title: str, content: str, user_id: int) -> None:
    """Add a post; its id is one more than the largest post id."""
    try:
        new_id = db.get_max_id("post") + 1
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the maximum id: {exc}") from exc
    try:
        db.execute(
            "INSERT INTO post (id, title, content, user_id, created_at) "
            "VALUES (?, ?, ?, ?, NOW())",
            new_id,
            title,
            content,
            user_id,
        )
    except DatabaseError as exc:
        raise DatabaseError(f"cannot create the post: {exc}") from exc


def _posts_for_ids(db: Database, ids: Sequence[int]) -> list[Post]:
    posts = []
    for post_id in ids:
        try:
            post = get_post_by_id(db, post_id)
        except DatabaseError as exc:
            raise DatabaseError(f"cannot fetch the post with id {post_id}: {exc}") from exc
        if post is not None:
            posts.append(post)
    return posts


def get_all_posts(db: Database) -> list[Post]:
    """Return the posts whose user_id matches an empty value."""
    try:
        ids = db.get_all_ids_by_something("post", "user_id", "")
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the post ids: {exc}") from exc
    return _posts_for_ids(db, ids)


def get_all_posts_by_user_id(db: Database, user_id: int) -> list[Post]:
    """Return every post written by a user."""
    try:
        ids = db.get_all_ids_by_something("post", "user_id", str(user_id))
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the post ids of user {user_id}: {exc}") from exc
    return _posts_for_ids(db, ids)


def edit_post_title(db: Database, post_id: int, new_title: str) -> None:
    """Change the title of a post."""
    try:
        db.edit_something_by_id("post", "title", new_title, post_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot update the title of post {post_id}: {exc}") from exc


def edit_post_content(db: Database, post_id: int, new_content: str) -> None:
    """Change the content of a post."""
    try:
        db.edit_something_by_id("post", "content", new_content, post_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot update the content of post {post_id}: {exc}") from exc


def get_post_vote_score(db: Database, post_id: int) -> int:
    """Return the sum of the votes on a post, 0 when there are none."""
    try:
        row = db.query_one("SELECT SUM(value) FROM vote WHERE post_id = ?", post_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the vote score of post {post_id}: {exc}") from exc
    if row is None or row[0] is None:
        return 0
    return int(row[0])


def delete_post(db: Database, post_id: int) -> None:
    """Delete a post; fail if it does not exist."""
    try:
        db.delete_something_by_id("post", post_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot delete the post with id {post_id}: {exc}") from exc


def sort_by_date(posts: list[Post]) -> list[Post]:
    """Sort posts in place, newest first, and return them."""
    posts.sort(key=lambda post: post.created_at, reverse=True)
    return posts


def sort_by_score(posts: list[Post], db: Database) -> list[Post]:
    """Sort posts in place by vote score, highest first, and return them."""
    scores = {}
    for post in posts:
        try:
            scores[post.id] = get_post_vote_score(db, post.id)
        except DatabaseError as exc:
            raise DatabaseError(
                f"cannot fetch the vote score of post {post.id}: {exc}"
            ) from exc
    posts.sort(key=lambda post: scores[post.id], reverse=True)
    return posts


def sort_by_tag(posts: Sequence[Post], tag: str) -> list[Post]:
    """Keep the posts whose title or content equals the tag."""
    return [post for post in posts if tag in (post.title, post.content)]


def get_post_by_tag(db: Database, tag: str) -> list[Post]:
    """Return the posts from get_all_posts whose title or content equals the tag."""
    try:
        posts = get_all_posts(db)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the posts: {exc}") from exc
    return sort_by_tag(posts, tag)


def add_tags_to_post(db: Database, post_id: int, tags: Sequence[str]) -> None:
    """Attach tags to a post, creating missing tags, all in one transaction."""
    with db.transaction():
        for name in tags:
            cursor = db.execute("INSERT IGNORE INTO tag (name) VALUES (?)", name)
            tag_id = cursor.lastrowid if cursor.rowcount else None
            if not tag_id:
                row = db.query_one("SELECT id FROM tag WHERE name = ?", name)
                if row is None:
                    raise DatabaseError(f"no tag named {name!r}")
                tag_id = row[0]
            db.execute(
                "INSERT IGNORE INTO post_tag (post_id, tag_id) VALUES (?, ?)",
                post_id,
                int(tag_id),
            )


def get_tags_by_post_id(db: Database, post_id: int) -> list[str]:
    """Return the names of the tags attached to a post."""
    rows = db.query_all(
        "SELECT t.name FROM tag t JOIN post_tag pt ON t.id = pt.tag_id "
        "WHERE pt.post_id = ?",
        post_id,
    )
    return [row[0] for row in rows]


def _query_posts(db: Database, query: str, *args: object) -> list[Post]:
    return [Post(*row) for row in db.query_all(query, *args)]


def get_posts_paginated(db: Database, page: int, page_size: int) -> list[Post]:
    """Return one page of posts; pages are numbered from 1."""
    offset = (page - 1) * page_size
    try:
        return _query_posts(
            db,
            f"SELECT {_POST_COLUMNS} FROM post LIMIT ? OFFSET ?",
            page_size,
            offset,
        )
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the paginated posts: {exc}") from exc


def search_posts(db: Database, query: str) -> list[Post]:
    """Return the posts whose title or content contains the query."""
    pattern = f"%{query}%"
    try:
        return _query_posts(
            db,
            f"SELECT {_POST_COLUMNS} FROM post WHERE title LIKE ? OR content LIKE ?",
            pattern,
            pattern,
        )
    except DatabaseError as exc:
        raise DatabaseError(f"cannot search the posts: {exc}") from exc


def is_post_owner(db: Database, post_id: int, user_id: int) -> bool:
    """Tell whether the user wrote the post; fail if the post does not exist."""
    try:
        row = db.query_one("SELECT user_id FROM post WHERE id = ?", post_id)
    except DatabaseError as exc:
        raise DatabaseError(f"cannot fetch the owner of the post: {exc}") from exc
    if row is None:
        raise DatabaseError(f"post with id {post_id} not found")
    return int(row[0]) == user_id