"""
Domain models for the improvement entry viewer.

This module contains the core domain entities.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class SessionState(Enum):
    """Screen the viewer is currently on."""

    INPUT = "input"
    VIEWING = "viewing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ImprovementEntry:
    """Domain model representing one before/after improvement record."""

    id: str
    control_number: str = ""
    record_number: str = ""
    area_code: str = ""
    category: str = ""
    title: str = ""
    description: str = ""
    before_image: str = ""
    after_image: str = ""
    improvement: str = ""
    improvement_effect: str = ""
    date_time: str = ""
    month: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "control_number": self.control_number,
            "record_number": self.record_number,
            "area_code": self.area_code,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "before_image": self.before_image,
            "after_image": self.after_image,
            "improvement": self.improvement,
            "improvement_effect": self.improvement_effect,
            "date_time": self.date_time,
            "month": self.month,
        }


@dataclass(frozen=True)
class ViewingSession:
    """
    One viewing attempt: the entries of a month shown in order.

    Transitions return a new session; the position always stays inside
    ``[0, len(entries))``.
    """

    identifier: str
    month: str
    entries: Tuple[ImprovementEntry, ...]
    position: int = 0

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError("a viewing session needs at least one entry")
        if not 0 <= self.position < len(self.entries):
            raise ValueError(
                f"position {self.position} out of range for {len(self.entries)} entries"
            )

    @property
    def current_entry(self) -> ImprovementEntry:
        return self.entries[self.position]

    @property
    def is_first(self) -> bool:
        return self.position == 0

    @property
    def is_last(self) -> bool:
        return self.position == len(self.entries) - 1

    @property
    def progress(self) -> Tuple[int, int]:
        """Return ``(1-based position, total)`` for the slide counter."""
        return (self.position + 1, len(self.entries))

    def next(self) -> "ViewingSession":
        if self.is_last:
            return self
        return replace(self, position=self.position + 1)

    def previous(self) -> "ViewingSession":
        if self.is_first:
            return self
        return replace(self, position=self.position - 1)


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a completion commit (or of a registration lookup)."""

    success: bool
    message: str
    data: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class RegistrationStatus:
    """Whether an identifier already completed a month, with the recorded date if known."""

    is_registered: bool
    message: str
    registration_date: Optional[str] = None
