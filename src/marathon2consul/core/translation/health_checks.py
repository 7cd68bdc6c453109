"""
Health Check Mapper - Convert Marathon health checks into Consul checks.

Each accepted check is keyed by its resolved port so the assembler can
attach it to the registration of that port. Checks that cannot be mapped
are dropped with a warning; they never abort the translation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..domain.entities import ApplicationDefinition, HealthCheckSpec, PortDefinition
from ..domain.enums import CheckKind
from ..domain.value_objects import CheckDescriptor, TranslationWarning
from .clock import format_duration


logger = logging.getLogger("marathon2consul.core.health_checks")

# Every accepted check tags its port with this value, TCP checks included.
CHECK_PORT_TAG = "http"


def resolve_check_port(check: HealthCheckSpec, ports: Sequence[PortDefinition]) -> int:
    """
    Resolve the port a health check targets.

    Uses the explicit port when positive, else the port of the port
    definition at `port_index`. Returns 0 when no port can be resolved.
    """
    if check.port is not None and check.port > 0:
        return check.port

    if check.port_index is None:
        return 0
    if check.port_index < 0 or check.port_index >= len(ports):
        return 0

    port = ports[check.port_index].port
    if port is None:
        return 0
    return port


def _map_check(index: int, check: HealthCheckSpec, port: int) -> CheckDescriptor:
    timeout = format_duration(check.timeout_seconds)
    interval = format_duration(check.interval_seconds)

    if check.protocol.is_tcp:
        return CheckDescriptor(
            name=f"marathon_tcp_check_{index}",
            kind=CheckKind.TCP,
            target=f"localhost:{port}",
            notes=f"tcp Marathon HealthCheck: {check.summary()}",
            timeout=timeout,
            interval=interval,
            port=port,
        )

    scheme = check.protocol.scheme or "http"
    path = check.path if check.path is not None else "/"
    return CheckDescriptor(
        name=f"marathon_http_check_{index}",
        kind=CheckKind.HTTP,
        target=f"{scheme}://localhost:{port}{path}",
        notes=f"{scheme} Marathon HealthCheck: {check.summary()}",
        timeout=timeout,
        interval=interval,
        port=port,
    )


def map_health_checks(
    app: ApplicationDefinition,
    warnings: list[TranslationWarning],
) -> tuple[list[CheckDescriptor], dict[int, list[str]]]:
    """
    Map all health checks of a definition.

    Args:
        app: Definition with port overrides already applied.
        warnings: Collector that receives a warning per dropped check.

    Returns:
        Tuple of (accepted checks in definition order, port -> tags).
    """
    checks: list[CheckDescriptor] = []
    port_tags: dict[int, list[str]] = {}

    for index, check in enumerate(app.health_checks):
        if not check.protocol.is_supported:
            message = f"Ignoring health check {index} of type {check.raw_protocol}"
            logger.warning(message)
            warnings.append(
                TranslationWarning(
                    code=TranslationWarning.UNKNOWN_PROTOCOL,
                    message=message,
                    context={"index": index, "protocol": check.raw_protocol},
                )
            )
            continue

        port = resolve_check_port(check, app.ports)
        if port <= 0:
            message = f"Bad port definition for health check {index}: {check.summary()}"
            logger.warning(message)
            warnings.append(
                TranslationWarning(
                    code=TranslationWarning.BAD_PORT,
                    message=message,
                    context={"index": index, "port": check.port, "port_index": check.port_index},
                )
            )
            continue

        checks.append(_map_check(index, check, port))
        port_tags.setdefault(port, []).append(CHECK_PORT_TAG)

    return checks, port_tags
