"""Tests for abnormal-reading alert detection."""

from __future__ import annotations

from vitaltrack.core.storage.models import BloodPressure, HealthEntry
from vitaltrack.domains.health.domain_logic.alerts import (
    WARNING_MARKER,
    abnormal_flags,
    alert_id,
    check_health_alerts,
    format_alert_messages,
    has_abnormal_values,
    is_heart_rate_abnormal,
    is_oxygen_level_abnormal,
    is_temperature_abnormal,
)


def _entry(**overrides) -> HealthEntry:
    defaults = dict(
        id="test_entry_1",
        user_id="usr_001",
        date="2026-02-18",
        heart_rate=72,
        blood_pressure=BloodPressure(systolic=120, diastolic=80),
        oxygen_level=98,
        temperature=36.6,
        symptoms=[],
        notes="",
        created_at="2026-02-18T10:00:00+00:00",
    )
    defaults.update(overrides)
    return HealthEntry(**defaults)


class TestMetricPredicates:
    def test_heart_rate_boundary_is_strict(self):
        assert is_heart_rate_abnormal(72) is False
        assert is_heart_rate_abnormal(120) is False
        assert is_heart_rate_abnormal(121) is True
        assert is_heart_rate_abnormal(120.1) is True

    def test_oxygen_level_boundary_is_strict(self):
        assert is_oxygen_level_abnormal(98) is False
        assert is_oxygen_level_abnormal(90) is False
        assert is_oxygen_level_abnormal(89) is True
        assert is_oxygen_level_abnormal(70) is True

    def test_temperature_boundary_is_strict(self):
        assert is_temperature_abnormal(36.6) is False
        assert is_temperature_abnormal(39) is False
        assert is_temperature_abnormal(39.1) is True
        assert is_temperature_abnormal(41) is True


class TestHasAbnormalValues:
    def test_normal_entry(self):
        assert has_abnormal_values(_entry()) is False

    def test_any_metric_counts(self):
        assert has_abnormal_values(_entry(heart_rate=150)) is True
        assert has_abnormal_values(_entry(oxygen_level=85)) is True
        assert has_abnormal_values(_entry(temperature=40)) is True

    def test_blood_pressure_never_counts(self):
        entry = _entry(blood_pressure=BloodPressure(systolic=250, diastolic=149))
        assert has_abnormal_values(entry) is False
        assert check_health_alerts(entry) == []

    def test_abnormal_flags(self):
        flags = abnormal_flags(_entry(oxygen_level=85))
        assert flags == {"heart_rate": False, "oxygen_level": True, "temperature": False}


class TestCheckHealthAlerts:
    def test_normal_entry_has_no_alerts(self):
        assert check_health_alerts(_entry()) == []

    def test_all_three_alerts_in_fixed_order(self):
        alerts = check_health_alerts(_entry(heart_rate=150, oxygen_level=85, temperature=40))
        assert len(alerts) == 3
        assert [a.metric for a in alerts] == [
            "Heart Rate", "Blood Oxygen (SpO2)", "Body Temperature",
        ]
        assert [a.severity for a in alerts] == ["warning", "critical", "warning"]

    def test_alert_carries_value_and_threshold(self):
        (alert,) = check_health_alerts(_entry(heart_rate=150))
        assert alert.value == 150
        assert alert.threshold == 120
        assert alert.message == "Heart rate is elevated above 120 bpm"
        assert alert.id == "alert_hr_test_entry_1"

    def test_single_oxygen_alert_is_critical(self):
        (alert,) = check_health_alerts(_entry(oxygen_level=89))
        assert alert.severity == "critical"
        assert alert.threshold == 90
        assert alert.id == "alert_spo2_test_entry_1"

    def test_values_at_thresholds_do_not_alert(self):
        assert check_health_alerts(_entry(heart_rate=120, oxygen_level=90, temperature=39)) == []

    def test_recomputation_is_stable(self):
        entry = _entry(heart_rate=150, oxygen_level=85, temperature=40)
        assert check_health_alerts(entry) == check_health_alerts(entry)

    def test_ids_follow_entry_identity(self):
        first = check_health_alerts(_entry(id="a", temperature=40))
        second = check_health_alerts(_entry(id="b", temperature=40))
        assert first[0].id != second[0].id


class TestAlertId:
    def test_deterministic_per_metric(self):
        assert alert_id("e1", "heart_rate") == "alert_hr_e1"
        assert alert_id("e1", "oxygen_level") == "alert_spo2_e1"
        assert alert_id("e1", "temperature") == "alert_temp_e1"


class TestFormatAlertMessages:
    def test_empty_returns_empty_string(self):
        assert format_alert_messages([]) == ""

    def test_single_alert(self):
        alerts = check_health_alerts(_entry(heart_rate=150))
        text = format_alert_messages(alerts)
        assert WARNING_MARKER in text
        assert "120" in text
        assert text == "⚠ Heart rate is elevated above 120 bpm"

    def test_messages_separated_by_blank_line_in_order(self):
        alerts = check_health_alerts(_entry(heart_rate=150, temperature=40))
        text = format_alert_messages(alerts)
        assert text == (
            "⚠ Heart rate is elevated above 120 bpm"
            "\n\n"
            "⚠ Body temperature exceeds 39°C (fever detected)"
        )
