"""Health Handler — liveness plus collaborator status, never a 5xx.

Invariants:
    - Always returns a body; a failing or slow probe reports "degraded"
    - "database" is degraded when the counter store probe fails, or when a wired
      database does not answer SELECT 1
    - The email collaborator is "operational" when configured, else "not_configured"
"""

import asyncio
import logging

from gateway.core.domain_types import ServiceStatus
from gateway.core.errors import UpstreamServiceError
from gateway.services.container import GatewayServices

logger = logging.getLogger(__name__)

PROBE_KEY = "health:probe"
PROBE_TIMEOUT_SECONDS = 2.0


async def probe_counter_store(services: GatewayServices) -> ServiceStatus:
    try:
        await asyncio.wait_for(
            services.counter_store.get(PROBE_KEY), timeout=PROBE_TIMEOUT_SECONDS,
        )
    except Exception as e:
        error = UpstreamServiceError("counter store", str(e) or type(e).__name__)
        logger.warning(
            f"Health probe failed: {error.message}",
            extra={"error_code": error.code, "service": "counter_store"},
        )
        return ServiceStatus.DEGRADED
    return ServiceStatus.OPERATIONAL


async def probe_database(services: GatewayServices) -> ServiceStatus:
    if services.db is None:
        return ServiceStatus.OPERATIONAL
    try:
        alive = await asyncio.wait_for(
            services.db.health_check(), timeout=PROBE_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        alive = False
    if not alive:
        logger.warning("Health probe failed: database", extra={"service": "database"})
        return ServiceStatus.DEGRADED
    return ServiceStatus.OPERATIONAL


async def check_health(services: GatewayServices) -> dict:
    store, db = await asyncio.gather(
        probe_counter_store(services), probe_database(services),
    )
    database = (
        ServiceStatus.OPERATIONAL
        if store == ServiceStatus.OPERATIONAL and db == ServiceStatus.OPERATIONAL
        else ServiceStatus.DEGRADED
    )
    email = (
        ServiceStatus.OPERATIONAL if services.email_sender.configured
        else ServiceStatus.NOT_CONFIGURED
    )
    overall = (
        ServiceStatus.HEALTHY if database == ServiceStatus.OPERATIONAL
        else ServiceStatus.DEGRADED
    )
    return {
        "status": overall.value,
        "timestamp": services.now().isoformat(),
        "version": services.settings.version,
        "services": {"database": database.value, "email": email.value},
    }
