"""Data models for the entry history."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class BloodPressure:
    """A blood pressure reading in mmHg."""

    systolic: float
    diastolic: float


@dataclass(frozen=True)
class HealthEntry:
    """One submitted set of vital-sign measurements.

    Entries are append-only: the repository assigns ``id`` and
    ``created_at`` when they are empty and nothing edits an entry afterwards.
    """

    id: str
    user_id: str
    date: str  # YYYY-MM-DD
    heart_rate: float  # bpm
    blood_pressure: BloodPressure
    oxygen_level: float  # SpO2 %
    temperature: float  # degrees Celsius
    symptoms: list[str] = field(default_factory=list)
    notes: str = ""
    created_at: str = ""  # ISO 8601

    def vitals_payload(self) -> dict[str, Any]:
        """Return the fields stored encrypted at rest."""
        return {
            "heart_rate": self.heart_rate,
            "blood_pressure": asdict(self.blood_pressure),
            "oxygen_level": self.oxygen_level,
            "temperature": self.temperature,
            "symptoms": list(self.symptoms),
            "notes": self.notes,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date,
            **self.vitals_payload(),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HealthEntry:
        """Rebuild an entry from :meth:`to_dict` output."""
        bp = data.get("blood_pressure") or {}
        return cls(
            id=data.get("id", ""),
            user_id=data.get("user_id", ""),
            date=data.get("date", ""),
            heart_rate=data["heart_rate"],
            blood_pressure=BloodPressure(
                systolic=bp["systolic"],
                diastolic=bp["diastolic"],
            ),
            oxygen_level=data["oxygen_level"],
            temperature=data["temperature"],
            symptoms=list(data.get("symptoms") or []),
            notes=data.get("notes") or "",
            created_at=data.get("created_at", ""),
        )
