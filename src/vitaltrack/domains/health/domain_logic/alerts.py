"""Abnormal-reading detection for stored health entries.

Alerts are derived on demand and never persisted. An alert id depends only
on the entry id and the metric, so recomputing alerts for the same entry
always yields the same ids.

All comparisons are strict: a reading exactly at a threshold (120 bpm,
90 %, 39 °C) is normal. Blood pressure is never alert-checked.
"""

from __future__ import annotations

from vitaltrack.core.storage.models import HealthEntry
from vitaltrack.domains.health.domain_logic.health_models import (
    ALERT_THRESHOLDS,
    AlertMetric,
    HealthAlert,
)

WARNING_MARKER = "⚠"


def is_heart_rate_abnormal(heart_rate: float) -> bool:
    return ALERT_THRESHOLDS["heart_rate"].is_crossed(heart_rate)


def is_oxygen_level_abnormal(oxygen_level: float) -> bool:
    return ALERT_THRESHOLDS["oxygen_level"].is_crossed(oxygen_level)


def is_temperature_abnormal(temperature: float) -> bool:
    return ALERT_THRESHOLDS["temperature"].is_crossed(temperature)


def _metric_values(entry: HealthEntry) -> dict[str, float]:
    return {
        "heart_rate": entry.heart_rate,
        "oxygen_level": entry.oxygen_level,
        "temperature": entry.temperature,
    }


def abnormal_flags(entry: HealthEntry) -> dict[str, bool]:
    """Per-metric highlight flags, keyed like the alert thresholds."""
    return {
        "heart_rate": is_heart_rate_abnormal(entry.heart_rate),
        "oxygen_level": is_oxygen_level_abnormal(entry.oxygen_level),
        "temperature": is_temperature_abnormal(entry.temperature),
    }


def has_abnormal_values(entry: HealthEntry) -> bool:
    """True if any alert-checked metric crosses its threshold."""
    return any(abnormal_flags(entry).values())


def alert_id(entry_id: str, metric: AlertMetric) -> str:
    """Stable alert id, e.g. ``alert_hr_<entry_id>``."""
    return f"alert_{ALERT_THRESHOLDS[metric].id_prefix}_{entry_id}"


def check_health_alerts(entry: HealthEntry) -> list[HealthAlert]:
    """Return alerts for an entry: heart rate, then SpO2, then temperature."""
    values = _metric_values(entry)
    alerts = []
    for metric, threshold in ALERT_THRESHOLDS.items():
        value = values[metric]
        if not threshold.is_crossed(value):
            continue
        alerts.append(HealthAlert(
            id=alert_id(entry.id, threshold.metric),
            metric=threshold.display_name,
            value=value,
            threshold=threshold.value,
            message=threshold.message,
            severity=threshold.severity,
        ))
    return alerts


def format_alert_messages(alerts: list[HealthAlert]) -> str:
    """Join alert messages for a notification, separated by a blank line."""
    return "\n\n".join(f"{WARNING_MARKER} {alert.message}" for alert in alerts)
