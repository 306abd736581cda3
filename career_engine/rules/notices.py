"""Player-facing notices produced by engine operations."""

from dataclasses import dataclass, field
from enum import Enum


class NoticeSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class Notice:
    """
    Readable summary of something that happened during a turn.

    The player sees: "Stage Advanced: SCAN".
    Not: "hunt_stage 1 -> 2 progress 108 -> 8".
    """
    headline: str
    details: list[str] = field(default_factory=list)
    severity: NoticeSeverity = NoticeSeverity.INFO

    def model_dump(self) -> dict:
        """Serialize for JSON (matches Pydantic convention)."""
        return {
            "headline": self.headline,
            "details": self.details,
            "severity": self.severity.value,
        }
