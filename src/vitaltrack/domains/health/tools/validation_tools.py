"""MCP tools for form validation and the symptom catalogue.

These need no storage and are always registered, so a client can give
per-field feedback while the user is still typing.
"""

from __future__ import annotations

import json

from fastmcp import Context, FastMCP

from vitaltrack.domains.health.domain_logic.health_models import (
    SYMPTOMS_LIST,
    VALIDATION_RANGES,
    HealthEntryFormData,
)
from vitaltrack.domains.health.domain_logic.validation import (
    get_field_error,
    validate_field,
    validate_health_entry,
)


def register_validation_tools(mcp: FastMCP) -> None:
    """Register validation tools on the MCP server."""

    @mcp.tool
    async def validate_entry_form(
        ctx: Context,
        heart_rate: str = "",
        systolic: str = "",
        diastolic: str = "",
        oxygen_level: str = "",
        temperature: str = "",
    ) -> str:
        """Check a health entry form without saving it.

        Returns every problem at once, plus the first message per field for
        displaying next to each input.

        Args:
            heart_rate: Heart rate in bpm, as typed.
            systolic: Systolic blood pressure in mmHg, as typed.
            diastolic: Diastolic blood pressure in mmHg, as typed.
            oxygen_level: Blood oxygen saturation (SpO2) in %, as typed.
            temperature: Body temperature in °C, as typed.
        """
        result = validate_health_entry(HealthEntryFormData(
            heart_rate=heart_rate,
            systolic=systolic,
            diastolic=diastolic,
            oxygen_level=oxygen_level,
            temperature=temperature,
        ))
        field_errors = {}
        for name in VALIDATION_RANGES:
            message = get_field_error(result.errors, name)
            if message is not None:
                field_errors[name] = message
        return json.dumps({**result.to_dict(), "field_errors": field_errors})

    @mcp.tool
    async def validate_entry_field(
        ctx: Context,
        field: str,
        value: str = "",
    ) -> str:
        """Check a single numeric form field.

        Args:
            field: One of 'heart_rate', 'systolic', 'diastolic',
                'oxygen_level', 'temperature'.
            value: The field's text, as typed.
        """
        try:
            errors = validate_field(field, value)
        except ValueError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        return json.dumps({
            "field": field,
            "is_valid": not errors,
            "error": errors[0].message if errors else None,
        })

    @mcp.tool
    async def list_symptoms(ctx: Context) -> str:
        """List the symptoms offered when logging an entry."""
        return json.dumps({"symptoms": list(SYMPTOMS_LIST)})
