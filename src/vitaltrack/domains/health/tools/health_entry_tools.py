"""MCP tools for logging and reviewing health entries.

Submission runs the full pipeline: validate the form, store the entry,
then check the stored entry for abnormal readings. Alerts are computed
fresh every time an entry is shown.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

from vitaltrack.core.storage.models import HealthEntry
from vitaltrack.domains.health.domain_logic.alerts import (
    abnormal_flags,
    check_health_alerts,
    format_alert_messages,
    has_abnormal_values,
)
from vitaltrack.domains.health.domain_logic.entries import (
    build_health_entry,
    latest_entry_for_date,
    today_iso,
)
from vitaltrack.domains.health.domain_logic.health_models import (
    HealthAlert,
    HealthEntryFormData,
    ValidationResult,
)
from vitaltrack.domains.health.domain_logic.validation import (
    validate_entry_date,
    validate_health_entry,
)

if TYPE_CHECKING:
    from vitaltrack.core.audit.logger import AuditLogger
    from vitaltrack.core.storage.repository import HealthEntryRepository

logger = logging.getLogger(__name__)


def _entry_view(entry: HealthEntry, alerts: list[HealthAlert]) -> dict[str, Any]:
    """Entry plus its alerts and per-metric highlight flags."""
    return {
        **entry.to_dict(),
        "alerts": [alert.to_dict() for alert in alerts],
        "abnormal": abnormal_flags(entry),
    }


def register_health_entry_tools(
    mcp: FastMCP,
    repository: HealthEntryRepository,
    *,
    user_id: str,
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register health entry tools on the MCP server."""

    @mcp.tool
    async def add_health_entry(
        ctx: Context,
        heart_rate: str,
        systolic: str,
        diastolic: str,
        oxygen_level: str,
        temperature: str,
        symptoms: list[str] | None = None,
        notes: str = "",
        entry_date: str = "",
    ) -> str:
        """Log today's vital signs and report any abnormal readings.

        Numeric values are taken as text, exactly as entered. If anything is
        invalid, nothing is saved and every problem is returned at once.

        Args:
            heart_rate: Heart rate in bpm (40-200).
            systolic: Systolic blood pressure in mmHg (60-250).
            diastolic: Diastolic blood pressure in mmHg (40-150).
            oxygen_level: Blood oxygen saturation (SpO2) in % (70-100).
            temperature: Body temperature in °C (34-42).
            symptoms: Symptom labels, e.g. from list_symptoms.
            notes: Optional free-text notes.
            entry_date: Day of the reading (YYYY-MM-DD). Defaults to today.
        """
        start_time = time.monotonic()
        form = HealthEntryFormData(
            heart_rate=heart_rate,
            systolic=systolic,
            diastolic=diastolic,
            oxygen_level=oxygen_level,
            temperature=temperature,
            symptoms=list(symptoms or []),
            notes=notes,
        )

        result = ValidationResult(
            errors=validate_health_entry(form).errors + validate_entry_date(entry_date)
        )
        if not result.is_valid:
            if audit_logger is not None:
                audit_logger.log_tool_call(
                    tool_name="add_health_entry",
                    tool_input={**asdict(form), "entry_date": entry_date},
                    duration_ms=(time.monotonic() - start_time) * 1000,
                    status="rejected",
                    metadata={"error_count": len(result.errors)},
                )
            return json.dumps({"status": "invalid", **result.to_dict()})

        entry = repository.add_entry(
            build_health_entry(form, user_id=user_id, entry_date=entry_date or None)
        )
        alerts = check_health_alerts(entry)
        elapsed_ms = (time.monotonic() - start_time) * 1000

        if audit_logger is not None:
            audit_logger.log_tool_call(
                tool_name="add_health_entry",
                tool_input={**asdict(form), "entry_date": entry_date},
                entry_id=entry.id,
                duration_ms=elapsed_ms,
                metadata={"alert_count": len(alerts)},
            )
        if alerts:
            logger.info("Entry %s saved with %d alert(s)", entry.id, len(alerts))

        return json.dumps({
            "status": "saved",
            "entry": entry.to_dict(),
            "alerts": [alert.to_dict() for alert in alerts],
            "alert_message": format_alert_messages(alerts),
        })

    @mcp.tool
    async def list_health_entries(
        ctx: Context,
        limit: int = 20,
    ) -> str:
        """List logged entries, newest first, flagging abnormal ones.

        Args:
            limit: Maximum number of entries to return (at least 1).
        """
        if limit < 1:
            return json.dumps({
                "status": "error",
                "message": "limit must be at least 1.",
            })

        entries = repository.get_entries(limit=limit)
        if audit_logger is not None:
            audit_logger.log_tool_call(
                tool_name="list_health_entries",
                tool_input={"limit": limit},
                metadata={"returned": len(entries)},
            )

        return json.dumps({
            "status": "ok",
            "count": len(entries),
            "entries": [
                {**entry.to_dict(), "has_abnormal_values": has_abnormal_values(entry)}
                for entry in entries
            ],
        }, indent=2)

    @mcp.tool
    async def get_health_entry(
        ctx: Context,
        entry_id: str,
    ) -> str:
        """Show one entry with its alerts.

        Args:
            entry_id: The id returned when the entry was saved.
        """
        entry = repository.get_entry(entry_id)
        if audit_logger is not None:
            audit_logger.log_tool_call(
                tool_name="get_health_entry",
                tool_input={"entry_id": entry_id},
                entry_id=entry_id,
                status="success" if entry is not None else "failure",
            )

        if entry is None:
            return json.dumps({
                "status": "not_found",
                "entry_id": entry_id,
                "message": "No health entry found with that ID.",
            })
        entry_view = _entry_view(entry, check_health_alerts(entry))
        return json.dumps({"status": "ok", "entry": entry_view}, indent=2)

    @mcp.tool
    async def today_summary(ctx: Context) -> str:
        """Show today's most recent entry and any alerts it raises."""
        day = today_iso()
        entry = latest_entry_for_date(repository.get_entries_for_date(day), day)
        if audit_logger is not None:
            audit_logger.log_tool_call(
                tool_name="today_summary",
                entry_id=entry.id if entry is not None else None,
            )

        if entry is None:
            return json.dumps({
                "status": "no_entry",
                "date": day,
                "message": "No health entry logged today.",
            })

        alerts = check_health_alerts(entry)
        return json.dumps({
            "status": "ok",
            "date": day,
            "entry": _entry_view(entry, alerts),
            "alert_message": format_alert_messages(alerts),
        }, indent=2)
