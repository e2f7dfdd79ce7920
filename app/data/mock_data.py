from __future__ import annotations

from datetime import datetime, timezone

from data.models import SYSTEM_AUTHOR, Companion


# (id, name, subject, topic, voice, style, duration)
_SEED = [
    ("1", "Neura the Brainy Explorer", "science", "Neural Network of the Brain", "female", "casual", 45),
    ("2", "Countsy the Number Wizard", "maths", "Derivatives & Integrals", "male", "formal", 30),
    ("3", "Verba the Vocabulary Builder", "language", "English Literature", "female", "casual", 30),
    ("4", "Codey the Logic Hacker", "coding", "Intro to If-Else Statements", "male", "casual", 45),
    ("5", "Memo, the Memory Keeper", "history", "World Wars: Causes & Consequences", "female", "formal", 15),
    ("6", "The Market Maestro", "economics", "The Basics of Supply & Demand", "male", "formal", 10),
]


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def fallback_companions_mock() -> list[Companion]:
    """Fresh copies of the synthetic companions, stamped with the current time."""
    ts = now_iso()
    return [
        Companion(
            id=cid,
            name=name,
            subject=subject,
            topic=topic,
            voice=voice,
            style=style,
            duration=duration,
            author=SYSTEM_AUTHOR,
            created_at=ts,
            updated_at=ts,
            bookmarked=False,
        )
        for cid, name, subject, topic, voice, style, duration in _SEED
    ]


def popular_companions_mock() -> list[Companion]:
    # Shown on the home page for everyone, signed in or not
    return fallback_companions_mock()
