"""
Route-path cache invalidation.

Views cache their loaders per route path; a write that changes what a path
shows calls `revalidate_path(path)` so the next render of that path re-fetches.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable, Protocol, TypeVar

import streamlit as st


logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


class Clearable(Protocol):
    def clear(self) -> None: ...


_lock = threading.Lock()
_loaders: dict[str, list[Clearable]] = defaultdict(list)
_stale: set[str] = set()


def register_loader(path: str, loader: Clearable) -> Clearable:
    with _lock:
        if loader not in _loaders[path]:
            _loaders[path].append(loader)
    return loader


def cached_for_path(path: str, ttl: int = 60) -> Callable[[F], F]:
    """`st.cache_data` a loader and register it under `path`."""

    def deco(fn: F) -> F:
        cached = st.cache_data(ttl=ttl, show_spinner=False)(fn)
        register_loader(path, cached)
        return cached

    return deco


def revalidate_path(path: str) -> None:
    """Fire-and-forget: drop cached loader output for `path`."""
    with _lock:
        loaders = list(_loaders.get(path, ()))
        _stale.add(path)
    for loader in loaders:
        loader.clear()
    logger.info("Revalidated %s (%d cached loaders)", path, len(loaders))


def consume_stale(path: str) -> bool:
    """True once after `path` was revalidated; used by views to show a refresh hint."""
    with _lock:
        if path in _stale:
            _stale.discard(path)
            return True
    return False
