"""MCP tool for reviewing the audit trail.

The trail holds no readings, only which tools ran, when, on which entry
id, and whether they succeeded.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from vitaltrack.core.audit.logger import AuditLogger


def register_audit_tools(
    mcp: FastMCP,
    audit_logger: AuditLogger,
) -> None:
    """Register audit trail tools on the MCP server."""

    @mcp.tool
    async def audit_summary(
        ctx: Context,
        days: int = 30,
    ) -> str:
        """View recent access and deletion events for your health entries.

        Args:
            days: Number of days to look back (default: 30).
        """
        since = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()

        recent_events = [
            {
                "timestamp": event["timestamp"],
                "action": event["action"],
                "tool_name": event["tool_name"],
                "entry_id": event["entry_id"],
                "status": event["status"],
                "duration_ms": event["duration_ms"],
            }
            for event in audit_logger.get_events(since=since, limit=20)
        ]

        return json.dumps({
            "status": "ok",
            "period_days": days,
            "total_events": audit_logger.count_events(since=since),
            "deletions": audit_logger.count_events(action="data_delete", since=since),
            "recent_events": recent_events,
        }, indent=2)
