"""Turning a validated form into a ``HealthEntry``, and history selectors."""

from __future__ import annotations

from datetime import datetime, timezone

from vitaltrack.core.storage.models import BloodPressure, HealthEntry
from vitaltrack.domains.health.domain_logic.health_models import HealthEntryFormData
from vitaltrack.domains.health.domain_logic.validation import (
    NumericField,
    classify_field,
    validate_entry_date,
    validate_health_entry,
)


def today_iso() -> str:
    """Today's date (UTC) as ``YYYY-MM-DD``."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def _number(text: str) -> float:
    raw = classify_field(text)
    if not isinstance(raw, NumericField):
        raise ValueError(f"Not a number: {text!r}")
    # Whole numbers are kept as int so 72 stays 72, not 72.0
    return int(raw.value) if raw.value.is_integer() else raw.value


def build_health_entry(
    form: HealthEntryFormData,
    *,
    user_id: str,
    entry_date: str | None = None,
) -> HealthEntry:
    """Build an unsaved entry from form input.

    ``id`` and ``created_at`` are left empty for the repository to assign.

    Raises:
        ValueError: If the form does not pass :func:`validate_health_entry`
            or ``entry_date`` is not a ``YYYY-MM-DD`` day.
    """
    errors = validate_health_entry(form).errors + validate_entry_date(entry_date)
    if errors:
        fields = ", ".join(sorted({e.field for e in errors}))
        raise ValueError(f"Cannot build a health entry from invalid form data ({fields})")

    return HealthEntry(
        id="",
        user_id=user_id,
        date=(entry_date or "").strip() or today_iso(),
        heart_rate=_number(form.heart_rate),
        blood_pressure=BloodPressure(
            systolic=_number(form.systolic),
            diastolic=_number(form.diastolic),
        ),
        oxygen_level=_number(form.oxygen_level),
        temperature=_number(form.temperature),
        symptoms=list(form.symptoms),
        notes=form.notes,
    )


def sort_entries_newest_first(entries: list[HealthEntry]) -> list[HealthEntry]:
    """Return a new list ordered by ``created_at``, newest first."""
    return sorted(entries, key=lambda e: e.created_at, reverse=True)


def latest_entry_for_date(entries: list[HealthEntry], day: str) -> HealthEntry | None:
    """Most recent entry recorded on ``day`` (``YYYY-MM-DD``), if any."""
    same_day = [e for e in entries if e.date.startswith(day)]
    if not same_day:
        return None
    return sort_entries_newest_first(same_day)[0]
