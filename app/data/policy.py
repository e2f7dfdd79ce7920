from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config import AppConfig
from data.auth import AuthState


@dataclass(frozen=True)
class CompanionLimitPolicy:
    """
    How many companions a caller may own, decided from identity capabilities.

    `allow_on_error` is the answer given when the owned-companion count cannot
    be read. True keeps creation open while the backend is down.
    """

    unlimited_plans: tuple[str, ...] = ("pro",)
    # Checked in order; first matching feature wins
    feature_limits: tuple[tuple[str, int], ...] = (
        ("3_companion_limit", 3),
        ("10_companion_limit", 10),
    )
    default_limit: int = 0
    allow_on_error: bool = True

    def limit_for(self, auth: AuthState) -> Optional[int]:
        """None means unlimited."""
        for plan in self.unlimited_plans:
            if auth.has(plan=plan):
                return None
        for feature, limit in self.feature_limits:
            if auth.has(feature=feature):
                return limit
        return self.default_limit

    @staticmethod
    def permits(owned: int, limit: Optional[int]) -> bool:
        return limit is None or owned < limit


def get_policy(cfg: AppConfig) -> CompanionLimitPolicy:
    return CompanionLimitPolicy(allow_on_error=cfg.permission_fail_open)
