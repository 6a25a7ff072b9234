"""Vital-sign value types and the fixed range/threshold tables.

The validation ranges and alert thresholds are separate tables with
separate jobs: ranges reject implausible *input*, thresholds flag plausible
but concerning *readings*. A heart rate of 150 is valid and still alerts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

# Numeric form fields, in the order the full-form validation reports them
# (blood pressure is validated last, systolic before diastolic).
FieldName = Literal["heart_rate", "oxygen_level", "temperature", "systolic", "diastolic"]

AlertSeverity = Literal["warning", "critical"]

AlertMetric = Literal["heart_rate", "oxygen_level", "temperature"]


# ---------------------------------------------------------------------------
# Validation ranges (inclusive bounds)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationRange:
    """Physiologically plausible input range for one form field."""

    label: str      # leading words of every error message for the field
    min: float
    max: float
    unit: str
    unit_on_each_bound: bool = False  # "70% and 100%" vs "40 and 200 bpm"

    def describe(self) -> str:
        """Render the bounds the way the range error message shows them."""
        if self.unit_on_each_bound:
            return f"{_fmt(self.min)}{self.unit} and {_fmt(self.max)}{self.unit}"
        return f"{_fmt(self.min)} and {_fmt(self.max)} {self.unit}"


VALIDATION_RANGES: dict[str, ValidationRange] = {
    "heart_rate": ValidationRange("Heart rate", 40, 200, "bpm"),
    "oxygen_level": ValidationRange("Blood oxygen level", 70, 100, "%", unit_on_each_bound=True),
    "temperature": ValidationRange("Body temperature", 34, 42, "°C", unit_on_each_bound=True),
    "systolic": ValidationRange("Systolic pressure", 60, 250, "mmHg"),
    "diastolic": ValidationRange("Diastolic pressure", 40, 150, "mmHg"),
}


# ---------------------------------------------------------------------------
# Alert thresholds (strict comparisons)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AlertThreshold:
    """Clinical alert boundary for one metric.

    ``direction`` is ``"above"`` when values greater than ``value`` alert and
    ``"below"`` when values less than ``value`` alert. Equality never alerts.
    """

    metric: AlertMetric
    display_name: str
    value: float
    direction: Literal["above", "below"]
    severity: AlertSeverity
    message: str
    id_prefix: str

    def is_crossed(self, reading: float) -> bool:
        if self.direction == "above":
            return reading > self.value
        return reading < self.value


# Ordered: alerts are always reported heart rate, SpO2, temperature.
ALERT_THRESHOLDS: dict[str, AlertThreshold] = {
    "heart_rate": AlertThreshold(
        metric="heart_rate",
        display_name="Heart Rate",
        value=120,
        direction="above",
        severity="warning",
        message="Heart rate is elevated above 120 bpm",
        id_prefix="hr",
    ),
    "oxygen_level": AlertThreshold(
        metric="oxygen_level",
        display_name="Blood Oxygen (SpO2)",
        value=90,
        direction="below",
        severity="critical",
        message="Blood oxygen level is critically low (below 90%)",
        id_prefix="spo2",
    ),
    "temperature": AlertThreshold(
        metric="temperature",
        display_name="Body Temperature",
        value=39,
        direction="above",
        severity="warning",
        message="Body temperature exceeds 39°C (fever detected)",
        id_prefix="temp",
    ),
}

SYMPTOMS_LIST: tuple[str, ...] = (
    "Headache",
    "Fatigue",
    "Nausea",
    "Dizziness",
    "Cough",
    "Shortness of Breath",
    "Chest Pain",
    "Fever",
)


# ---------------------------------------------------------------------------
# Form input and result types
# ---------------------------------------------------------------------------

@dataclass
class HealthEntryFormData:
    """Raw form input: numeric fields exactly as the user typed them."""

    heart_rate: str = ""
    systolic: str = ""
    diastolic: str = ""
    oxygen_level: str = ""
    temperature: str = ""
    symptoms: list[str] = field(default_factory=list)
    notes: str = ""


@dataclass(frozen=True)
class ValidationError:
    """One field-level validation failure."""

    field: str
    message: str


@dataclass
class ValidationResult:
    """All errors from one validation pass, in report order."""

    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": [{"field": e.field, "message": e.message} for e in self.errors],
        }


@dataclass(frozen=True)
class HealthAlert:
    """A threshold crossing on a stored reading. Recomputed, never stored."""

    id: str
    metric: str
    value: float
    threshold: float
    message: str
    severity: AlertSeverity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "metric": self.metric,
            "value": self.value,
            "threshold": self.threshold,
            "message": self.message,
            "severity": self.severity,
        }


def _fmt(value: float) -> str:
    """Format a bound without a trailing ``.0``."""
    return str(int(value)) if float(value).is_integer() else str(value)
