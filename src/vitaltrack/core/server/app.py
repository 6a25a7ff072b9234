"""VitalTrack MCP server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from vitaltrack.core.audit.logger import AuditLogger
from vitaltrack.core.config.settings import get_settings
from vitaltrack.core.storage.database import HealthDatabase
from vitaltrack.core.storage.encryption import EncryptionError, FieldEncryptor
from vitaltrack.core.storage.repository import HealthEntryRepository
from vitaltrack.domains.health.tools.validation_tools import register_validation_tools

logger = logging.getLogger(__name__)

SERVER_VERSION = "0.1.0"


def create_app(
    *,
    repository_override: HealthEntryRepository | None = None,
    audit_logger_override: AuditLogger | None = None,
) -> FastMCP:
    """Create and configure the VitalTrack MCP server.

    1. Creates the FastMCP server instance
    2. Initializes the encrypted entry store when ENCRYPTION_KEY is set
    3. Registers validation tools (always) and entry tools (with storage)
    """
    settings = get_settings()

    server = FastMCP(
        "VitalTrack",
        instructions=(
            "Personal vital-sign log. Validates daily readings (heart rate, "
            "blood pressure, SpO2, temperature, symptoms), stores them locally "
            "encrypted, and flags abnormal readings."
        ),
    )

    # --- Initialize encrypted storage (entry history) ---
    repository: HealthEntryRepository | None = None
    audit_logger: AuditLogger | None = audit_logger_override
    if repository_override is not None:
        repository = repository_override
    elif settings.encryption_key:
        try:
            encryptor = FieldEncryptor(settings.encryption_key)
            health_db = HealthDatabase(settings.db_path)
            health_db.initialize()
            repository = HealthEntryRepository(health_db, encryptor)
            if audit_logger is None:
                audit_logger = AuditLogger(health_db)
            logger.info(
                "Entry store initialized: %s (schema v%d)",
                settings.db_path,
                health_db.get_schema_version(),
            )
        except EncryptionError as exc:
            logger.error("Failed to initialize storage: %s", exc)
            logger.warning("Continuing without persistence — entries will not be stored")
    else:
        logger.info(
            "No ENCRYPTION_KEY configured — running without persistence. "
            "Set ENCRYPTION_KEY to enable the entry store."
        )

    @server.tool
    async def health_check() -> dict:
        """Check server health and return basic status information."""
        status = {
            "status": "ok",
            "server": "VitalTrack",
            "version": SERVER_VERSION,
            "storage_enabled": repository is not None,
            "audit_enabled": audit_logger is not None,
        }
        if repository is not None:
            status["entries_stored"] = repository.count_entries()
        return status

    register_validation_tools(server)
    logger.info("Validation tools registered")

    # --- Entry tools (require storage) ---
    if repository is not None:
        from vitaltrack.domains.health.tools.data_management_tools import (
            register_data_management_tools,
        )
        from vitaltrack.domains.health.tools.health_entry_tools import (
            register_health_entry_tools,
        )

        register_health_entry_tools(
            server,
            repository,
            user_id=settings.default_user_id,
            audit_logger=audit_logger,
        )
        register_data_management_tools(server, repository, audit_logger)
        logger.info("Health entry tools registered")

    if audit_logger is not None:
        from vitaltrack.domains.health.tools.audit_tools import register_audit_tools

        register_audit_tools(server, audit_logger)
        logger.info("Audit tools registered")

    return server


# Module-level instance for FastMCP discovery (``fastmcp run ...app.py:mcp``).
# Lazy: only created when accessed, so tests importing create_app stay hermetic.
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
