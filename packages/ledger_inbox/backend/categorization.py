"""Token memory used to pre-fill ``suggestedCategory`` on import.

Descriptions are split on non-alphanumeric characters; tokens longer than two
characters are lower-cased and mapped to the last category a user confirmed
for a description containing them. Suggestion picks the first token (in
description order) with a known category.
"""

from __future__ import annotations

import re

from db.models.ledger import CategorizationToken
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

_SPLIT_RE = re.compile(r"[\W_]+")


def tokenize(description: str) -> list[str]:
    return [t.lower() for t in _SPLIT_RE.split(description) if len(t) > 2]


def suggest(session: Session, description: str) -> str | None:
    tokens = tokenize(description)
    if not tokens:
        return None
    rows = session.execute(
        select(CategorizationToken.token, CategorizationToken.category).where(
            CategorizationToken.token.in_(tokens)
        )
    ).all()
    known = {token: category for token, category in rows}
    for token in tokens:
        if token in known:
            return known[token]
    return None


def learn(session: Session, description: str, category: str) -> int:
    """Record ``category`` for every token of ``description``; return tokens written."""

    tokens = list(dict.fromkeys(tokenize(description)))
    insert = pg_insert if session.get_bind().dialect.name == "postgresql" else sqlite_insert
    for token in tokens:
        stmt = insert(CategorizationToken).values(token=token, category=category)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CategorizationToken.token],
            set_={
                "category": stmt.excluded.category,
                "hit_count": CategorizationToken.hit_count + 1,
                "updated_at": func.current_timestamp(),
            },
        )
        session.execute(stmt)
    return len(tokens)


__all__ = ["learn", "suggest", "tokenize"]
