"""Tests for HealthEntryRepository — persistence, ordering, deletion."""

from __future__ import annotations

import pytest

from vitaltrack.core.storage.encryption import FieldEncryptor
from vitaltrack.core.storage.models import BloodPressure, HealthEntry
from vitaltrack.core.storage.repository import HealthEntryRepository, RepositoryError


def _entry(**overrides) -> HealthEntry:
    defaults = dict(
        id="",
        user_id="usr_test",
        date="2026-02-18",
        heart_rate=72,
        blood_pressure=BloodPressure(systolic=120, diastolic=80),
        oxygen_level=98,
        temperature=36.6,
        symptoms=["Fatigue"],
        notes="after run",
        created_at="",
    )
    defaults.update(overrides)
    return HealthEntry(**defaults)


class TestAddAndGet:
    def test_add_assigns_identity(self, health_repository):
        saved = health_repository.add_entry(_entry())
        assert saved.id
        assert saved.created_at
        assert health_repository.count_entries() == 1

    def test_add_keeps_existing_identity(self, health_repository):
        saved = health_repository.add_entry(
            _entry(id="e1", created_at="2026-02-18T08:00:00+00:00")
        )
        assert saved.id == "e1"
        assert saved.created_at == "2026-02-18T08:00:00+00:00"

    def test_get_entry_round_trip(self, health_repository):
        saved = health_repository.add_entry(_entry())
        loaded = health_repository.get_entry(saved.id)
        assert loaded == saved

    def test_get_missing_entry(self, health_repository):
        assert health_repository.get_entry("missing") is None

    def test_vitals_are_encrypted_at_rest(self, health_repository, health_db):
        saved = health_repository.add_entry(_entry(notes="secret note"))
        row = health_db.connection.execute(
            "SELECT payload_enc FROM health_entries WHERE id = ?", (saved.id,)
        ).fetchone()
        assert "secret note" not in row["payload_enc"]
        assert "heart_rate" not in row["payload_enc"]


class TestQueries:
    def test_entries_newest_first(self, health_repository):
        health_repository.add_entry(_entry(id="a", created_at="2026-02-16T08:00:00+00:00"))
        health_repository.add_entry(_entry(id="c", created_at="2026-02-18T08:00:00+00:00"))
        health_repository.add_entry(_entry(id="b", created_at="2026-02-17T08:00:00+00:00"))
        assert [e.id for e in health_repository.get_entries()] == ["c", "b", "a"]

    def test_limit_and_since(self, health_repository):
        for i in range(1, 6):
            health_repository.add_entry(
                _entry(id=f"e{i}", created_at=f"2026-02-1{i}T08:00:00+00:00")
            )
        assert len(health_repository.get_entries(limit=2)) == 2
        recent = health_repository.get_entries(since="2026-02-14T00:00:00+00:00")
        assert [e.id for e in recent] == ["e5", "e4"]

    def test_entries_for_date(self, health_repository):
        health_repository.add_entry(
            _entry(id="m", date="2026-02-18", created_at="2026-02-18T07:00:00+00:00")
        )
        health_repository.add_entry(
            _entry(id="e", date="2026-02-18", created_at="2026-02-18T19:00:00+00:00")
        )
        health_repository.add_entry(
            _entry(id="y", date="2026-02-17", created_at="2026-02-17T19:00:00+00:00")
        )
        assert [e.id for e in health_repository.get_entries_for_date("2026-02-18")] == ["e", "m"]
        assert health_repository.get_entries_for_date("2026-01-01") == []


class TestDeletion:
    def test_delete_entry(self, health_repository):
        saved = health_repository.add_entry(_entry())
        assert health_repository.delete_entry(saved.id) is True
        assert health_repository.get_entry(saved.id) is None
        assert health_repository.delete_entry(saved.id) is False

    def test_purge_before(self, health_repository):
        health_repository.add_entry(_entry(id="old", created_at="2020-01-01T00:00:00+00:00"))
        health_repository.add_entry(_entry(id="new"))
        assert health_repository.purge_before_days(30) == 1
        assert [e.id for e in health_repository.get_entries()] == ["new"]

    def test_clear_entries(self, health_repository):
        health_repository.add_entry(_entry())
        health_repository.add_entry(_entry())
        assert health_repository.clear_entries() == 2
        assert health_repository.count_entries() == 0


class TestCorruption:
    def test_wrong_key_surfaces_repository_error(self, health_db, health_repository):
        saved = health_repository.add_entry(_entry())
        other = HealthEntryRepository(health_db, FieldEncryptor(FieldEncryptor.generate_key()))
        with pytest.raises(RepositoryError, match=saved.id):
            other.get_entry(saved.id)
