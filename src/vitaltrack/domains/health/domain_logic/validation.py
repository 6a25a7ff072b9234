"""Health entry form validation.

Pure functions: text in, list of ``ValidationError`` out. Nothing here
raises for bad user input and nothing does I/O, so the same validators serve
full-form submission and live per-field feedback.

Every numeric field goes through one shared step, :func:`classify_field`,
which sorts the raw text into empty / numeric / malformed. The per-field
check then runs required → numeric → range and stops at the first failure.

Whitespace policy: input is trimmed before classification, so ``" 72 "``
is the number 72 and ``"   "`` is empty.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date

from vitaltrack.domains.health.domain_logic.health_models import (
    VALIDATION_RANGES,
    FieldName,
    HealthEntryFormData,
    ValidationError,
    ValidationResult,
)

# Plain decimal literal: optional sign, digits with optional fraction (or a
# bare fraction), optional exponent. Rejects "nan", "inf", "0x10", "1_000".
_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


# ---------------------------------------------------------------------------
# Raw field classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EmptyField:
    """Nothing but whitespace was entered."""


@dataclass(frozen=True)
class NumericField:
    value: float


@dataclass(frozen=True)
class MalformedField:
    text: str


RawFieldInput = EmptyField | NumericField | MalformedField


def classify_field(text: str | None) -> RawFieldInput:
    """Classify raw form text as empty, numeric, or malformed."""
    stripped = (text or "").strip()
    if not stripped:
        return EmptyField()
    if not _NUMBER_RE.fullmatch(stripped):
        return MalformedField(stripped)
    value = float(stripped)
    # "1e999" matches the pattern but overflows to inf
    if not math.isfinite(value):
        return MalformedField(stripped)
    return NumericField(value)


def _check_field(field: str, raw: RawFieldInput) -> list[ValidationError]:
    rng = VALIDATION_RANGES[field]

    if isinstance(raw, EmptyField):
        return [ValidationError(field, f"{rng.label} is required")]
    if isinstance(raw, MalformedField):
        return [ValidationError(field, f"{rng.label} must be a valid number")]
    if raw.value < rng.min or raw.value > rng.max:
        return [ValidationError(field, f"{rng.label} must be between {rng.describe()}")]
    return []


# ---------------------------------------------------------------------------
# Single-field validators
# ---------------------------------------------------------------------------

def validate_heart_rate(value: str) -> list[ValidationError]:
    """Validate heart rate (bpm)."""
    return _check_field("heart_rate", classify_field(value))


def validate_oxygen_level(value: str) -> list[ValidationError]:
    """Validate blood oxygen saturation (SpO2 %)."""
    return _check_field("oxygen_level", classify_field(value))


def validate_temperature(value: str) -> list[ValidationError]:
    """Validate body temperature (°C)."""
    return _check_field("temperature", classify_field(value))


def validate_blood_pressure(systolic: str, diastolic: str) -> list[ValidationError]:
    """Validate systolic and diastolic pressure, then compare them.

    Each side gets its own required/numeric/range check. When both sides
    parsed as numbers, even if out of range, systolic must also exceed
    diastolic; that error is reported against ``systolic``. Up to three
    errors can come back.
    """
    raw_systolic = classify_field(systolic)
    raw_diastolic = classify_field(diastolic)

    errors = _check_field("systolic", raw_systolic)
    errors.extend(_check_field("diastolic", raw_diastolic))

    if (
        isinstance(raw_systolic, NumericField)
        and isinstance(raw_diastolic, NumericField)
        and raw_systolic.value <= raw_diastolic.value
    ):
        errors.append(ValidationError(
            "systolic", "Systolic pressure must be greater than diastolic pressure"
        ))

    return errors


_SINGLE_FIELD_VALIDATORS = {
    "heart_rate": validate_heart_rate,
    "oxygen_level": validate_oxygen_level,
    "temperature": validate_temperature,
}


def validate_field(field: FieldName, value: str) -> list[ValidationError]:
    """Validate one numeric field by name, for live feedback while typing.

    ``systolic`` and ``diastolic`` are checked on their own here; the
    cross-field comparison needs both values and only runs in
    :func:`validate_blood_pressure`.

    Raises:
        ValueError: If ``field`` is not a numeric form field.
    """
    validator = _SINGLE_FIELD_VALIDATORS.get(field)
    if validator is not None:
        return validator(value)
    if field in ("systolic", "diastolic"):
        return _check_field(field, classify_field(value))
    raise ValueError(f"Unknown form field: {field!r}. Valid: {sorted(VALIDATION_RANGES)}")


# ---------------------------------------------------------------------------
# Full form
# ---------------------------------------------------------------------------

def validate_health_entry(data: HealthEntryFormData) -> ValidationResult:
    """Validate a complete form, collecting every error.

    Order is heart rate, oxygen level, temperature, blood pressure. Later
    fields are still checked when earlier ones fail, so an empty form
    reports all five required fields at once.
    """
    errors: list[ValidationError] = []
    errors.extend(validate_heart_rate(data.heart_rate))
    errors.extend(validate_oxygen_level(data.oxygen_level))
    errors.extend(validate_temperature(data.temperature))
    errors.extend(validate_blood_pressure(data.systolic, data.diastolic))
    return ValidationResult(errors=errors)


def get_field_error(errors: list[ValidationError], field: str) -> str | None:
    """Return the first error message for ``field``, if any."""
    return next((error.message for error in errors if error.field == field), None)


def _is_calendar_date(text: str) -> bool:
    if not _DATE_RE.fullmatch(text):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def validate_entry_date(value: str | None) -> list[ValidationError]:
    """Validate an optional ``YYYY-MM-DD`` entry day.

    Empty means "today" and passes. Anything else must be a real calendar
    date in exactly that form.
    """
    stripped = (value or "").strip()
    if not stripped:
        return []
    if _is_calendar_date(stripped):
        return []
    return [ValidationError("entry_date", "Entry date must be a valid date (YYYY-MM-DD)")]
