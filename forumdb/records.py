"""Row records for the forum tables."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

_Timestamp = Union[datetime, str]


def _as_datetime(value: _Timestamp) -> datetime:
    """Accept a datetime or an ISO-formatted string as stored by the database."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class User:
    """A registered forum member."""

    id: int
    username: str
    email: str
    passwd_hash: str
    salt: str
    created_at: datetime

    def __post_init__(self) -> None:
        self.created_at = _as_datetime(self.created_at)


@dataclass
class Post:
    """A post written by a user."""

    id: int
    title: str
    content: str
    user_id: int
    created_at: datetime

    def __post_init__(self) -> None:
        self.created_at = _as_datetime(self.created_at)


@dataclass
class Comment:
    """A comment on a post, optionally replying to another comment."""

    id: int
    content: str
    user_id: int
    post_id: Optional[int]
    parent_comment_id: Optional[int]
    created_at: datetime

    def __post_init__(self) -> None:
        self.created_at = _as_datetime(self.created_at)


@dataclass
class Vote:
    """A vote cast on either a post or a comment."""

    id: int
    user_id: int
    post_id: Optional[int]
    comment_id: Optional[int]
    value: int
    created_at: datetime

    def __post_init__(self) -> None:
        self.created_at = _as_datetime(self.created_at)


@dataclass(frozen=True)
class Tag:
    """A named tag that can be attached to posts."""

    id: int
    name: str