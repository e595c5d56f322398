"""Shared data models for the collector."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class DateRange:
    """The finalized start and end of an event, both in UTC.

    No ordering between ``start`` and ``end`` is enforced; the values are
    passed through exactly as the page states them.
    """

    start: datetime
    end: datetime

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class Event:
    """Summary of a single event-overview page."""

    canonical_url: str
    title: str
    final_date: Optional[DateRange] = None
    open_registration_link: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation of the event."""
        return {
            "canonical_url": self.canonical_url,
            "title": self.title,
            "final_date": self.final_date.to_dict() if self.final_date else None,
            "open_registration_link": self.open_registration_link,
        }
