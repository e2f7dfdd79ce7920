from __future__ import annotations

from typing import Any, Optional

from data.models import BOOKMARKS, COMPANION_RELATION, COMPANIONS, SESSION_HISTORY, CompanionPage

# Each function returns an unexecuted PostgREST request builder; service.py executes it.


def _ilike(value: str) -> str:
    return f"%{value}%"


def q_all_companions(
    client,
    subject: Optional[str] = None,
    topic: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
):
    """subject AND (topic OR name), paged by an inclusive [start, end] window."""
    query = client.table(COMPANIONS).select("*")

    if subject:
        query = query.ilike("subject", _ilike(subject))
    if topic:
        query = query.or_(f"topic.ilike.{_ilike(topic)},name.ilike.{_ilike(topic)}")

    window = CompanionPage(page=page, limit=limit)
    if window.end < window.start:
        # limit=0: empty window
        return query.limit(0)
    return query.range(window.start, window.end)


def q_companion_by_id(client, companion_id: str):
    return client.table(COMPANIONS).select("*").eq("id", companion_id)


def q_insert_companion(client, row: dict[str, Any]):
    return client.table(COMPANIONS).insert(row)


def q_insert_session(client, row: dict[str, Any]):
    return client.table(SESSION_HISTORY).insert(row)


def q_recent_sessions(client, limit: int = 10):
    return (
        client.table(SESSION_HISTORY)
        .select(COMPANION_RELATION)
        .order("created_at", desc=True)
        .limit(limit)
    )


def q_user_sessions(client, user_id: str, limit: int = 10):
    return (
        client.table(SESSION_HISTORY)
        .select(COMPANION_RELATION)
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .limit(limit)
    )


def q_user_companions(client, user_id: str):
    return client.table(COMPANIONS).select("*").eq("author", user_id)


def q_count_user_companions(client, user_id: str):
    return client.table(COMPANIONS).select("id", count="exact").eq("author", user_id)


def q_insert_bookmark(client, row: dict[str, Any]):
    return client.table(BOOKMARKS).insert(row)


def q_delete_bookmark(client, companion_id: str, user_id: str):
    return (
        client.table(BOOKMARKS)
        .delete()
        .eq("companion_id", companion_id)
        .eq("user_id", user_id)
    )


def q_bookmarked_companions(client, user_id: str):
    return client.table(BOOKMARKS).select(COMPANION_RELATION).eq("user_id", user_id)
