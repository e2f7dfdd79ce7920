from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional

from postgrest.exceptions import APIError

from config import AppConfig
from data import mock_data, queries
from data.auth import ANONYMOUS, AuthState, get_auth
from data.connection import create_supabase_client
from data.fallback_store import FallbackCompanionStore, get_fallback_store
from data.models import Bookmark, Companion, CompanionDraft, SessionHistoryEntry
from data.policy import CompanionLimitPolicy, get_policy
from data.revalidation import revalidate_path


logger = logging.getLogger(__name__)

LIVE = "live"
FALLBACK = "fallback"


class EmptyResultError(RuntimeError):
    """The live query succeeded but returned nothing usable."""


@dataclass(frozen=True)
class DataResult:
    value: Any
    source: str  # "live" | "fallback"
    warning: str | None = None

    @property
    def is_live(self) -> bool:
        return self.source == LIVE


@dataclass(frozen=True)
class DataContext:
    cfg: AppConfig
    use_fallback: bool
    auth: Callable[[], AuthState]
    store: FallbackCompanionStore
    policy: CompanionLimitPolicy
    revalidate: Callable[[str], None] = revalidate_path
    client_factory: Callable[[AppConfig, AuthState], Any] = create_supabase_client


def get_data_context(cfg: AppConfig, use_fallback: bool) -> DataContext:
    return DataContext(
        cfg=cfg,
        use_fallback=use_fallback,
        auth=lambda: get_auth(cfg),
        store=get_fallback_store(),
        policy=get_policy(cfg),
    )


def _caller(ctx: DataContext) -> AuthState:
    try:
        return ctx.auth()
    except Exception as e:
        logger.warning("Could not resolve caller, continuing anonymously: %s", e)
        return ANONYMOUS


def _fallback(ctx: DataContext, what: str, fn_live: Callable[[], Any], fn_fallback: Callable[[], Any]) -> DataResult:
    if ctx.use_fallback:
        return DataResult(value=fn_fallback(), source=FALLBACK)
    try:
        return DataResult(value=fn_live(), source=LIVE)
    except EmptyResultError:
        logger.info("No live rows %s, returning fallback data", what)
        return DataResult(value=fn_fallback(), source=FALLBACK)
    except APIError as e:
        logger.warning("Database error %s, returning fallback data: %s", what, e.message)
        return DataResult(value=fn_fallback(), source=FALLBACK, warning=f"Fell back to local data: {type(e).__name__}")
    except Exception as e:
        logger.warning("Error %s, returning fallback data: %s", what, e)
        return DataResult(value=fn_fallback(), source=FALLBACK, warning=f"Fell back to local data: {type(e).__name__}")


def _client(ctx: DataContext, auth: AuthState):
    return ctx.client_factory(ctx.cfg, auth)


def _companions(rows: Optional[Iterable[dict]]) -> list[Companion]:
    return [Companion.from_row(r) for r in rows or []]


def _joined_companions(rows: Optional[Iterable[dict]]) -> list[Companion]:
    # Rows look like {"companions": {...}}; the relation is null when the companion is gone
    return [Companion.from_row(r["companions"]) for r in rows or [] if r.get("companions")]


def _revalidate(ctx: DataContext, path: str) -> None:
    try:
        ctx.revalidate(path)
    except Exception as e:
        logger.warning("Revalidation of %s failed: %s", path, e)


# --- companions -------------------------------------------------------------


def get_all_companions(
    ctx: DataContext,
    limit: int = 10,
    page: int = 1,
    subject: Optional[str] = None,
    topic: Optional[str] = None,
) -> DataResult:
    def live() -> list[Companion]:
        client = _client(ctx, _caller(ctx))
        resp = queries.q_all_companions(client, subject=subject, topic=topic, page=page, limit=limit).execute()
        return _companions(resp.data)

    return _fallback(
        ctx,
        "fetching companions",
        fn_live=live,
        fn_fallback=lambda: ctx.store.search(subject=subject, topic=topic, page=page, limit=limit),
    )


def get_companion(ctx: DataContext, companion_id: str) -> DataResult:
    def live() -> Companion:
        client = _client(ctx, _caller(ctx))
        resp = queries.q_companion_by_id(client, companion_id).execute()
        if not resp.data:
            raise EmptyResultError(companion_id)
        return Companion.from_row(resp.data[0])

    return _fallback(
        ctx,
        f"fetching companion {companion_id}",
        fn_live=live,
        fn_fallback=lambda: ctx.store.find_or_first(companion_id),
    )


def get_user_companions(ctx: DataContext, user_id: str) -> DataResult:
    def live() -> list[Companion]:
        client = _client(ctx, _caller(ctx))
        return _companions(queries.q_user_companions(client, user_id).execute().data)

    return _fallback(ctx, "fetching user companions", fn_live=live, fn_fallback=list)


def create_companion(ctx: DataContext, draft: CompanionDraft) -> DataResult:
    auth = _caller(ctx)

    def live() -> Companion:
        client = _client(ctx, auth)
        resp = queries.q_insert_companion(client, draft.to_row(auth.user_id)).execute()
        if not resp.data:
            raise EmptyResultError("insert returned no rows")
        return Companion.from_row(resp.data[0])

    return _fallback(
        ctx,
        "creating companion",
        fn_live=live,
        fn_fallback=lambda: ctx.store.create(draft, author=auth.user_id),
    )


def new_companion_permissions(ctx: DataContext) -> DataResult:
    """True when the caller may create another companion under `ctx.policy`."""
    auth = _caller(ctx)
    limit = ctx.policy.limit_for(auth)
    if limit is None:
        return DataResult(value=True, source=LIVE)
    if not auth.is_signed_in:
        return DataResult(value=False, source=LIVE)

    def live() -> bool:
        client = _client(ctx, auth)
        resp = queries.q_count_user_companions(client, auth.user_id).execute()
        owned = resp.count if resp.count is not None else len(resp.data or [])
        return ctx.policy.permits(owned, limit)

    return _fallback(
        ctx,
        "checking companion permissions",
        fn_live=live,
        fn_fallback=lambda: ctx.policy.allow_on_error,
    )


def popular_companions() -> list[Companion]:
    return [replace(c, bookmarked=False) for c in mock_data.popular_companions_mock()]


def mark_bookmarked(companions: Iterable[Companion], bookmarked_ids: Iterable[str]) -> list[Companion]:
    ids = set(bookmarked_ids)
    return [replace(c, bookmarked=c.id in ids) for c in companions]


# --- session history --------------------------------------------------------


def add_to_session_history(ctx: DataContext, companion_id: str) -> DataResult:
    auth = _caller(ctx)
    if not auth.is_signed_in:
        return DataResult(value=None, source=LIVE, warning="Sign in to save your session history")

    def live():
        client = _client(ctx, auth)
        entry = SessionHistoryEntry(companion_id=companion_id, user_id=auth.user_id)
        return queries.q_insert_session(client, entry.to_row()).execute().data

    return _fallback(ctx, "adding to session history", fn_live=live, fn_fallback=lambda: None)


def get_recent_sessions(ctx: DataContext, limit: int = 10) -> DataResult:
    def live() -> list[Companion]:
        client = _client(ctx, _caller(ctx))
        return _joined_companions(queries.q_recent_sessions(client, limit).execute().data)

    return _fallback(ctx, "fetching recent sessions", fn_live=live, fn_fallback=lambda: ctx.store.prefix(limit))


def get_user_sessions(ctx: DataContext, user_id: str, limit: int = 10) -> DataResult:
    def live() -> list[Companion]:
        client = _client(ctx, _caller(ctx))
        return _joined_companions(queries.q_user_sessions(client, user_id, limit).execute().data)

    return _fallback(ctx, "fetching user sessions", fn_live=live, fn_fallback=lambda: ctx.store.prefix(limit))


# --- bookmarks --------------------------------------------------------------


def add_bookmark(ctx: DataContext, companion_id: str, path: str) -> DataResult:
    """Insert a bookmark for the caller. `path` is revalidated exactly once, even on failure."""
    try:
        auth = _caller(ctx)
        if not auth.is_signed_in:
            return DataResult(value=None, source=LIVE, warning="Sign in to bookmark companions")

        def live():
            client = _client(ctx, auth)
            row = Bookmark(companion_id=companion_id, user_id=auth.user_id).to_row()
            return queries.q_insert_bookmark(client, row).execute().data

        return _fallback(ctx, "adding bookmark", fn_live=live, fn_fallback=lambda: None)
    finally:
        _revalidate(ctx, path)


def remove_bookmark(ctx: DataContext, companion_id: str, path: str) -> DataResult:
    try:
        auth = _caller(ctx)
        if not auth.is_signed_in:
            return DataResult(value=None, source=LIVE, warning="Sign in to bookmark companions")

        def live():
            client = _client(ctx, auth)
            return queries.q_delete_bookmark(client, companion_id, auth.user_id).execute().data

        return _fallback(ctx, "removing bookmark", fn_live=live, fn_fallback=lambda: None)
    finally:
        _revalidate(ctx, path)


def get_bookmarked_companions(ctx: DataContext, user_id: str) -> DataResult:
    def live() -> list[Companion]:
        client = _client(ctx, _caller(ctx))
        rows = _joined_companions(queries.q_bookmarked_companions(client, user_id).execute().data)
        return [replace(c, bookmarked=True) for c in rows]

    return _fallback(ctx, "fetching bookmarked companions", fn_live=live, fn_fallback=list)
