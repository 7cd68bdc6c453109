"""
Service Assembler - Build one Consul registration per eligible port.

Port definitions are walked in order:
1. skip when no positive port is assigned
2. skip an unnamed port once a main (unnamed) service was emitted
3. skip when the port opts out with consul_registration=no|false
4. otherwise emit a registration
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from ..domain.entities import ApplicationDefinition, PortDefinition, ServiceRegistration
from ..domain.value_objects import CheckDescriptor, TranslationWarning
from .clock import Clock
from .metadata import service_meta, service_weights
from .tags import CTAGS_LABEL, split_ctags


logger = logging.getLogger("marathon2consul.core.assembler")

SERVICE_NAME_LABEL = "consul_service_name"
REGISTRATION_LABEL = "consul_registration"
OPT_OUT_VALUES = frozenset({"no", "false"})

_NON_ALPHANUMERIC_RE = re.compile(r"[^a-zA-Z0-9]")


def sanitize_name(name: str) -> str:
    """Replace '/' and '.' with '-' and drop a single leading '-'."""
    name = name.replace("/", "-").replace(".", "-")
    if name.startswith("-"):
        name = name[1:]
    return name


def default_app_name(app: ApplicationDefinition) -> str:
    """The application-level service name label, or the raw app id."""
    if app.has_label(SERVICE_NAME_LABEL):
        return app.label(SERVICE_NAME_LABEL)
    return app.id


def app_name(default_name: str, port_def: PortDefinition) -> str:
    """Compute the Consul service name of a port definition."""
    override = port_def.label(SERVICE_NAME_LABEL)
    if override:
        return sanitize_name(override)
    if port_def.name:
        return sanitize_name(f"{default_name}-{port_def.name}")
    return sanitize_name(default_name)


def service_id(name: str, port: int, app_id: str) -> str:
    """
    Compute a registration id that is stable across syncs.

    Format: marathon-app-<escaped name>-<port>-<suffix>, where the suffix is
    the second dot segment of the app id stripped of non-alphanumerics
    (empty when the id has no second segment).
    """
    escaped = _NON_ALPHANUMERIC_RE.sub("-", name)
    segments = app_id.split(".")
    suffix = _NON_ALPHANUMERIC_RE.sub("", segments[1]) if len(segments) > 1 else ""
    return f"marathon-app-{escaped}-{port}-{suffix}"


def is_opted_out(port_def: PortDefinition) -> bool:
    """Check if the port definition opts out of registration."""
    return port_def.label(REGISTRATION_LABEL) in OPT_OUT_VALUES


def assemble_services(
    app: ApplicationDefinition,
    tags: Sequence[str],
    checks: Sequence[CheckDescriptor],
    port_tags: Mapping[int, Sequence[str]],
    clock: Clock,
    warnings: list[TranslationWarning],
) -> list[ServiceRegistration]:
    """
    Assemble the registrations of a definition.

    Args:
        app: Definition with port overrides already applied.
        tags: Global tags shared by every registration.
        checks: Mapped health checks of the definition.
        port_tags: Per-port tags contributed by health checks.
        clock: Time source for the per-registration `start` meta.
        warnings: Collector for per-entry anomalies.

    Returns:
        Registrations in port definition order.
    """
    default_name = default_app_name(app)
    has_main_service = False
    registrations: list[ServiceRegistration] = []

    for port_def in app.ports:
        port = port_def.port
        if port is None or port <= 0:
            continue
        if has_main_service and not port_def.name:
            logger.debug(f"Skipping unnamed port {port}: main service already registered")
            continue
        if is_opted_out(port_def):
            logger.debug(f"Skipping port {port}: registration disabled by label")
            continue

        service_tags = list(tags)
        service_tags.extend(split_ctags(port_def.label(CTAGS_LABEL)))
        service_tags.extend(split_ctags(app.label(CTAGS_LABEL)))
        service_tags.extend(port_tags.get(port, ()))
        service_tags.sort()

        name = app_name(default_name, port_def)
        registrations.append(
            ServiceRegistration(
                id=service_id(name, port, app.id),
                name=name,
                port=port,
                tags=service_tags,
                meta=service_meta(app, port_def, clock()),
                weights=service_weights(app, port_def, warnings),
                checks=[check for check in checks if check.port == port],
            )
        )

        if not port_def.name:
            has_main_service = True

    return registrations
