"""
In-memory companion repository used whenever the live backend is unavailable.

The store is process-lifetime: records created here are lost on restart. All
reads and writes go through one lock so concurrent fallback-creates cannot
interleave or hand out the same id.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from functools import lru_cache
from typing import Callable, Iterable, Optional

from data import mock_data
from data.models import SYSTEM_AUTHOR, Companion, CompanionDraft, CompanionPage


logger = logging.getLogger(__name__)


def contains_ci(haystack: Optional[str], needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def matches_filters(companion: Companion, subject: Optional[str], topic: Optional[str]) -> bool:
    """subject matches AND (topic matches OR name matches); empty filters match everything."""
    if subject and not contains_ci(companion.subject, subject):
        return False
    if topic and not (contains_ci(companion.topic, topic) or contains_ci(companion.name, topic)):
        return False
    return True


class FallbackCompanionStore:
    def __init__(
        self,
        companions: Optional[Iterable[Companion]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._lock = threading.Lock()
        self._clock = clock
        seed = mock_data.fallback_companions_mock() if companions is None else companions
        self._companions: list[Companion] = [replace(c) for c in seed]

    def all(self) -> list[Companion]:
        with self._lock:
            return [replace(c) for c in self._companions]

    def search(
        self,
        subject: Optional[str] = None,
        topic: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> list[Companion]:
        window = CompanionPage(page=page, limit=limit)
        with self._lock:
            matching = [c for c in self._companions if matches_filters(c, subject, topic)]
            return [replace(c) for c in matching[window.start : window.end + 1]]

    def find(self, companion_id: str) -> Optional[Companion]:
        with self._lock:
            for c in self._companions:
                if c.id == companion_id:
                    return replace(c)
        return None

    def find_or_first(self, companion_id: str) -> Optional[Companion]:
        """Never empty while the store has records: a miss resolves to the first entry."""
        with self._lock:
            for c in self._companions:
                if c.id == companion_id:
                    return replace(c)
            return replace(self._companions[0]) if self._companions else None

    def prefix(self, limit: int = 10) -> list[Companion]:
        with self._lock:
            return [replace(c) for c in self._companions[: max(0, limit)]]

    def create(self, draft: CompanionDraft, author: Optional[str] = None) -> Companion:
        ts = mock_data.now_iso()
        with self._lock:
            companion = Companion(
                id=self._next_id(),
                name=draft.name,
                subject=draft.subject,
                topic=draft.topic,
                voice=draft.voice,
                style=draft.style,
                duration=int(draft.duration),
                author=author or SYSTEM_AUTHOR,
                created_at=ts,
                updated_at=ts,
                bookmarked=False,
            )
            self._companions.insert(0, companion)
        logger.info("Stored companion %s in fallback store", companion.id)
        return replace(companion)

    def __len__(self) -> int:
        with self._lock:
            return len(self._companions)

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped until unique. Caller holds the lock.
        taken = {c.id for c in self._companions}
        candidate = int(self._clock() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)


@lru_cache(maxsize=1)
def get_fallback_store() -> FallbackCompanionStore:
    return FallbackCompanionStore()
