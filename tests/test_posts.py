import sqlite3
from datetime import datetime

import pytest

from forumdb import posts
from forumdb.db import Database, DatabaseError
from forumdb.records import Post

SCHEMA = """
CREATE TABLE user (
    id INTEGER PRIMARY KEY,
    username TEXT NOT NULL,
    email TEXT NOT NULL,
    passwd_hash TEXT NOT NULL,
    salt TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE post (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    user_id INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE vote (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL,
    post_id INTEGER,
    comment_id INTEGER,
    value INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE tag (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);
CREATE TABLE post_tag (
    post_id INTEGER NOT NULL,
    tag_id INTEGER NOT NULL,
    PRIMARY KEY (post_id, tag_id)
);
"""


@pytest.fixture
def db():
    connection = sqlite3.connect(":memory:")
    connection.executescript(SCHEMA)
    database = Database(connection, "sqlite")
    yield database
    connection.close()


def _post(post_id, title="t", content="c", user_id=1, created_at="2024-01-01 00:00:00"):
    return Post(post_id, title, content, user_id, created_at)


def _add_vote(db, vote_id, post_id, value):
    db.execute(
        "INSERT INTO vote (id, user_id, post_id, value, created_at) VALUES (?, ?, ?, ?, NOW())",
        vote_id,
        1,
        post_id,
        value,
    )


def test_basic_flow(db):
    posts.create_post(db, "Titre Test", "Contenu test", 1)
    assert posts.get_post_vote_score(db, 1) == 0

    posts.add_tags_to_post(db, 1, ["tag1", "tag2"])
    assert sorted(posts.get_tags_by_post_id(db, 1)) == ["tag1", "tag2"]

    assert posts.get_post_by_tag(db, "tag1") == []
    assert posts.sort_by_date([]) == []
    assert posts.sort_by_score([], db) == []
    assert posts.sort_by_tag([], "tag1") == []

    page = posts.get_posts_paginated(db, 1, 10)
    assert [p.title for p in page] == ["Titre Test"]

    found = posts.search_posts(db, "test")
    assert [p.id for p in found] == [1]

    assert posts.is_post_owner(db, 1, 1) is True


def test_create_and_get_post(db):
    posts.create_post(db, "Hello", "World", 7)
    posts.create_post(db, "Second", "Body", 7)
    post = posts.get_post_by_id(db, 2)
    assert post.title == "Second"
    assert post.content == "Body"
    assert post.user_id == 7
    assert isinstance(post.created_at, datetime)


def test_get_missing_post_returns_none(db):
    assert posts.get_post_by_id(db, 42) is None


def test_get_all_posts_by_user_id(db):
    posts.create_post(db, "a", "x", 1)
    posts.create_post(db, "b", "y", 2)
    posts.create_post(db, "c", "z", 1)
    assert [p.title for p in posts.get_all_posts_by_user_id(db, 1)] == ["a", "c"]
    assert posts.get_all_posts_by_user_id(db, 3) == []


def test_get_all_posts_on_empty_table(db):
    assert posts.get_all_posts(db) == []


def test_edit_title_and_content(db):
    posts.create_post(db, "old", "old body", 1)
    posts.edit_post_title(db, 1, "new")
    posts.edit_post_content(db, 1, "new body")
    post = posts.get_post_by_id(db, 1)
    assert (post.title, post.content) == ("new", "new body")


def test_vote_score_sums_values(db):
    posts.create_post(db, "a", "b", 1)
    _add_vote(db, 1, 1, 1)
    _add_vote(db, 2, 1, 1)
    _add_vote(db, 3, 1, -1)
    assert posts.get_post_vote_score(db, 1) == 1


def test_delete_post(db):
    posts.create_post(db, "a", "b", 1)
    posts.delete_post(db, 1)
    assert posts.get_post_by_id(db, 1) is None


def test_delete_missing_post_raises(db):
    with pytest.raises(DatabaseError):
        posts.delete_post(db, 99)


def test_sort_by_date_newest_first():
    items = [
        _post(1, created_at="2024-01-01 00:00:00"),
        _post(2, created_at="2024-03-01 00:00:00"),
        _post(3, created_at="2024-02-01 00:00:00"),
    ]
    result = posts.sort_by_date(items)
    assert [p.id for p in result] == [2, 3, 1]


def test_sort_by_date_keeps_order_of_ties():
    items = [_post(1), _post(2), _post(3)]
    assert [p.id for p in posts.sort_by_date(items)] == [1, 2, 3]


def test_sort_by_score_highest_first(db):
    for post_id in (1, 2, 3):
        posts.create_post(db, f"t{post_id}", "c", 1)
    _add_vote(db, 1, 2, 5)
    _add_vote(db, 2, 3, 2)
    _add_vote(db, 3, 1, -1)
    items = [posts.get_post_by_id(db, i) for i in (1, 2, 3)]
    assert [p.id for p in posts.sort_by_score(items, db)] == [2, 3, 1]


def test_sort_by_tag_matches_title_or_content():
    items = [
        _post(1, title="news", content="x"),
        _post(2, title="y", content="news"),
        _post(3, title="newsletter", content="z"),
    ]
    assert [p.id for p in posts.sort_by_tag(items, "news")] == [1, 2]


def test_add_tags_reuses_existing_tags(db):
    posts.create_post(db, "a", "b", 1)
    posts.create_post(db, "c", "d", 1)
    posts.add_tags_to_post(db, 1, ["news", "misc"])
    posts.add_tags_to_post(db, 2, ["misc"])
    posts.add_tags_to_post(db, 2, ["misc"])
    assert posts.get_tags_by_post_id(db, 2) == ["misc"]
    assert db.query_one("SELECT COUNT(*) FROM tag") == (2,)


def test_get_tags_of_untagged_post(db):
    assert posts.get_tags_by_post_id(db, 1) == []


def test_pagination(db):
    for n in range(1, 6):
        posts.create_post(db, f"p{n}", "c", 1)
    assert [p.id for p in posts.get_posts_paginated(db, 2, 2)] == [3, 4]
    assert [p.id for p in posts.get_posts_paginated(db, 3, 2)] == [5]
    assert posts.get_posts_paginated(db, 4, 2) == []


def test_search_posts(db):
    posts.create_post(db, "apple pie", "sweet", 1)
    posts.create_post(db, "bread", "with apple", 1)
    posts.create_post(db, "soup", "hot", 1)
    assert [p.id for p in posts.search_posts(db, "apple")] == [1, 2]
    assert posts.search_posts(db, "nothing") == []


def test_is_post_owner(db):
    posts.create_post(db, "a", "b", 4)
    assert posts.is_post_owner(db, 1, 4) is True
    assert posts.is_post_owner(db, 1, 5) is False


def test_is_post_owner_missing_post(db):
    with pytest.raises(DatabaseError, match="not found"):
        posts.is_post_owner(db, 12, 1)