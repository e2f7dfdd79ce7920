"""
Row types for the companion tables.

These mirror the Supabase tables; rows come back from PostgREST as plain dicts
and are converted at the data-layer boundary so views never touch raw rows.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Optional

# Table names - single source of truth for queries
COMPANIONS = "companions"
SESSION_HISTORY = "session_history"
BOOKMARKS = "bookmarks"

# Nested relation projection through the companion_id foreign key
COMPANION_RELATION = "companions:companion_id (*)"

SYSTEM_AUTHOR = "system"


@dataclass
class Companion:
    id: str
    name: str
    subject: str
    topic: str
    voice: str
    style: str
    duration: int
    author: str = SYSTEM_AUTHOR
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    # Derived per caller, never persisted with the row
    bookmarked: bool = False

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Companion":
        known = {f.name for f in fields(cls)}
        data = {k: v for k, v in row.items() if k in known}
        data["id"] = str(data.get("id", ""))
        data["duration"] = int(data.get("duration") or 0)
        data["author"] = data.get("author") or SYSTEM_AUTHOR
        data["bookmarked"] = bool(data.get("bookmarked", False))
        for name in ("name", "subject", "topic", "voice", "style"):
            data[name] = data.get(name) or ""
        return cls(**data)


@dataclass(frozen=True)
class CompanionDraft:
    """Create-form payload: everything the caller chooses about a new companion."""

    name: str
    subject: str
    topic: str
    voice: str
    style: str
    duration: int

    def to_row(self, author: Optional[str]) -> dict[str, Any]:
        row = asdict(self)
        row["author"] = author
        return row


@dataclass(frozen=True)
class SessionHistoryEntry:
    companion_id: str
    user_id: Optional[str]
    created_at: Optional[str] = None

    def to_row(self) -> dict[str, Any]:
        # created_at is assigned by the database default
        return {"companion_id": self.companion_id, "user_id": self.user_id}


@dataclass(frozen=True)
class Bookmark:
    companion_id: str
    user_id: str

    def to_row(self) -> dict[str, Any]:
        return {"companion_id": self.companion_id, "user_id": self.user_id}


@dataclass(frozen=True)
class CompanionPage:
    """Paging window in offset space: rows [start, end] inclusive."""

    page: int = 1
    limit: int = 10
    start: int = field(init=False)
    end: int = field(init=False)

    def __post_init__(self) -> None:
        page = max(1, int(self.page))
        limit = max(0, int(self.limit))
        object.__setattr__(self, "page", page)
        object.__setattr__(self, "limit", limit)
        object.__setattr__(self, "start", (page - 1) * limit)
        object.__setattr__(self, "end", page * limit - 1)
