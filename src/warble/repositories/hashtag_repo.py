"""Hashtag extraction and persistence."""
from __future__ import annotations

import re
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from warble.models.post import Hashtag

__all__ = ["HashtagRepository", "extract_hashtags", "normalize_hashtag"]

# A tag must start a whitespace-delimited token; "foo#bar" and URL fragments do not count.
HASHTAG_PATTERN = re.compile(r"(?<!\S)#(\w+)")


def normalize_hashtag(tag: str) -> str:
    """Return the stored form of a tag: no leading ``#``, lowercase."""
    return tag.strip().lstrip("#").lower()


def extract_hashtags(content: str) -> list[str]:
    """Return the distinct lowercase hashtags in ``content`` in first-seen order."""
    return list(dict.fromkeys(match.lower() for match in HASHTAG_PATTERN.findall(content)))


class HashtagRepository:
    """Looks up and creates ``Hashtag`` rows by name."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_name(self, name: str) -> Hashtag | None:
        stmt = select(Hashtag).where(Hashtag.name == normalize_hashtag(name))
        return self.session.execute(stmt).scalars().first()

    def get_or_create_many(self, names: Iterable[str]) -> list[Hashtag]:
        """Return hashtags for ``names`` in the given order, creating missing ones.

        A concurrent creator of the same name makes the flush fail on the
        unique constraint; callers treat that as a conflict.
        """
        wanted = list(dict.fromkeys(normalize_hashtag(name) for name in names))
        if not wanted:
            return []
        existing = {
            tag.name: tag
            for tag in self.session.execute(
                select(Hashtag).where(Hashtag.name.in_(wanted))
            ).scalars()
        }
        for name in wanted:
            if name not in existing:
                tag = Hashtag(name=name)
                self.session.add(tag)
                existing[name] = tag
        self.session.flush()
        return [existing[name] for name in wanted]
