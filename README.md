# forumdb

A data access layer for a small discussion forum. It covers user accounts
(salted SHA-256 password hashes), posts, comments with optional replies,
votes and tags, stored in MySQL or SQLite.

## Installation

```
pip install forumdb
```

For running the tests:

```
pip install "forumdb[test]"
```

## Connecting

`forumdb.db.init_db()` opens a MySQL connection (through PyMySQL, with an
empty password) using these environment variables, each with a default:

| Variable  | Default     |
|-----------|-------------|
| `DB_USER` | `root`      |
| `DB_HOST` | `localhost` |
| `DB_PORT` | `3306`      |
| `DB_NAME` | `bdd_forum` |

The connection is made once and the same `Database` is returned by later
calls until it is closed with `Database.close()`. Failures to connect raise
`forumdb.db.DatabaseError`.

A `forumdb.db.Database` can also wrap any DB-API connection directly:
`Database(connection, "mysql")` or `Database(connection, "sqlite")`. Queries
are written with `?` placeholders and adapted to the dialect; with SQLite a
`NOW()` function is registered and `INSERT IGNORE` becomes
`INSERT OR IGNORE`. `Database.transaction()` is a context manager that
commits on success and rolls back on any exception.

```python
import sqlite3
from forumdb.db import Database

db = Database(sqlite3.connect("forum.db"), "sqlite")
```

## Example

```python
from forumdb.db import init_db
from forumdb import users, posts, tags

db = init_db()

users.create_user(db, "alice", "alice@example.com", "password")
alice = users.connect_user(db, "alice", "password")

posts.create_post(db, "Hello", "First post", alice.id)
tags.create_tag_if_not_exists(db, "intro")
posts.add_tags_to_post(db, 1, ["intro"])

print(posts.get_tags_by_post_id(db, 1))
for post in posts.sort_by_date(posts.get_all_posts_by_user_id(db, alice.id)):
    print(post.title, posts.get_post_vote_score(db, post.id))
```

## Modules

- `forumdb.records`: the `User`, `Post`, `Comment`, `Vote` and `Tag`
  dataclasses. `created_at` accepts a `datetime` or an ISO-formatted string.
- `forumdb.db`: `Database`, `DatabaseError`, `init_db`,
  `get_env_with_default` and generic table helpers (`get_max_id`,
  `get_id_by_something`, `get_all_ids_by_something`, `edit_something_by_id`,
  `delete_something_by_id`, `get_all_ids`, `get_count_by_something`).
  Table and column names given to these helpers must be plain identifiers,
  otherwise `ValueError` is raised.
- `forumdb.users`: `create_user`, `connect_user`, `check_password`,
  `check_username_exists`, `get_user_by_id`, `edit_password`, `edit_email`,
  `edit_username` and `hash_password`. Registering a taken username raises
  `ValueError`; a failed login raises `AuthenticationError`;
  `get_user_by_id` raises `DatabaseError` for an unknown id.
- `forumdb.posts`: creating, editing, deleting, searching (`search_posts`),
  paginating (`get_posts_paginated`, pages from 1), sorting (`sort_by_date`
  newest first, `sort_by_score` highest first) and tagging posts, vote
  scores and ownership checks (`is_post_owner`). `sort_by_tag` and
  `get_post_by_tag` keep posts whose title or content equals the tag
  exactly. `get_all_posts` looks up posts whose `user_id` equals an empty
  value; use `get_all_posts_by_user_id` or `get_posts_paginated` to list
  posts.
- `forumdb.comments`: `create_comment` and `get_comment_by_id`.
- `forumdb.votes`: `create_vote` on a post or, if none is given, a comment
  (`ValueError` if neither is given), and `get_vote_by_id`.
- `forumdb.tags`: `create_tag`, `create_tag_if_not_exists`,
  `get_tag_by_name` and `get_all_tags`.

New users and posts get an id one greater than the largest id in their
table. New comments and votes also take one greater than the largest
**post** id.

`get_post_by_id`, `get_comment_by_id`, `get_vote_by_id` and
`get_tag_by_name` return `None` when nothing matches; database failures
raise `DatabaseError`.

## What this package does not do

It does not create the database schema: the tables `user`, `post`,
`comment`, `vote`, `tag` and `post_tag` must already exist. It has no web
server, pages or command-line tool; it is only the storage layer a forum
application would call.