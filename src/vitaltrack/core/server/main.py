"""Run VitalTrack over Streamable HTTP: ``python -m vitaltrack.core.server.main``.

The server speaks for a single local user and has no authentication of its
own. Anything that can reach the port can read and delete the entry
history, so only loopback binds are allowed unless ``ALLOW_INSECURE_BIND``
is set.
"""

from __future__ import annotations

import logging
from ipaddress import ip_address

from vitaltrack.core.config.settings import Settings, get_settings
from vitaltrack.core.server.app import create_app

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        # Hostnames other than localhost may resolve anywhere
        return False


def _check_bind(settings: Settings) -> None:
    if settings.allow_insecure_bind or _is_loopback_host(settings.server_host):
        return
    raise RuntimeError(
        f"Refusing to serve health entries on non-loopback host {settings.server_host!r}: "
        "VitalTrack has no auth layer. Set ALLOW_INSECURE_BIND=true to override (unsafe)."
    )


def run() -> None:
    """Start the VitalTrack MCP server."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    _check_bind(settings)
    if not settings.encryption_key:
        logger.warning("ENCRYPTION_KEY is not set: entries can be validated but not saved")
    logger.info(
        "Starting VitalTrack on %s:%d (db=%s)",
        settings.server_host,
        settings.server_port,
        settings.db_path,
    )

    mcp = create_app()
    mcp.run(
        transport="streamable-http",
        host=settings.server_host,
        port=settings.server_port,
    )


if __name__ == "__main__":
    run()
