"""MCP tools for deleting stored health entries.

History is append-only, so removal is the only way to change it: one
entry, everything older than a cutoff, or the whole history. Every
deletion is audit-logged.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from vitaltrack.core.audit.logger import AuditLogger
    from vitaltrack.core.storage.repository import HealthEntryRepository

CLEAR_CONFIRMATION = "DELETE_ALL"


def register_data_management_tools(
    mcp: FastMCP,
    repository: HealthEntryRepository,
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register data management tools on the MCP server."""

    @mcp.tool
    async def delete_health_entry(
        ctx: Context,
        entry_id: str,
    ) -> str:
        """Permanently delete one health entry.

        Args:
            entry_id: The id of the entry to delete.
        """
        if not repository.delete_entry(entry_id):
            return json.dumps({
                "status": "not_found",
                "entry_id": entry_id,
                "message": "No health entry found with that ID.",
            })

        if audit_logger is not None:
            audit_logger.log_data_delete(
                tool_name="delete_health_entry",
                entry_id=entry_id,
                count=1,
            )
        return json.dumps({"status": "deleted", "entry_id": entry_id})

    @mcp.tool
    async def purge_old_entries(
        ctx: Context,
        older_than_days: int = 365,
    ) -> str:
        """Delete all health entries older than a number of days.

        Args:
            older_than_days: Delete entries older than this (default: 365).
        """
        if older_than_days < 1:
            return json.dumps({
                "status": "error",
                "message": "older_than_days must be at least 1.",
            })

        start_time = time.monotonic()
        count = repository.purge_before_days(older_than_days)
        elapsed_ms = (time.monotonic() - start_time) * 1000

        if audit_logger is not None and count > 0:
            audit_logger.log_data_delete(
                tool_name="purge_old_entries",
                count=count,
                metadata={"older_than_days": older_than_days},
            )

        return json.dumps({
            "status": "purged",
            "entries_deleted": count,
            "older_than_days": older_than_days,
            "duration_ms": round(elapsed_ms, 1),
        })

    @mcp.tool
    async def clear_health_data(
        ctx: Context,
        confirm: str = "",
    ) -> str:
        """Permanently delete the entire health entry history.

        Args:
            confirm: Must be exactly 'DELETE_ALL' to proceed.
        """
        if confirm != CLEAR_CONFIRMATION:
            return json.dumps({
                "status": "cancelled",
                "message": (
                    "To delete all health entries, call this tool with "
                    f"confirm='{CLEAR_CONFIRMATION}'. This action cannot be undone."
                ),
            })

        count = repository.clear_entries()
        if audit_logger is not None:
            audit_logger.log_data_delete(
                tool_name="clear_health_data",
                count=count,
                metadata={"confirmed": True},
            )

        return json.dumps({
            "status": "all_deleted",
            "entries_deleted": count,
            "message": "All health entries have been permanently deleted.",
        })
