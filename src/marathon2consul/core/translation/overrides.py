"""
Port Resolver - Apply operator port overrides to a definition.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace

from ..domain.entities import ApplicationDefinition


logger = logging.getLogger("marathon2consul.core.overrides")


def apply_port_overrides(
    app: ApplicationDefinition,
    overrides: Mapping[int, int] | None,
) -> ApplicationDefinition:
    """
    Replace the port of overridden port definitions.

    Indices that do not exist in this definition are ignored; the override
    config is operator supplied and may target another version of the app.

    Args:
        app: Definition to resolve. It is not modified.
        overrides: Port-list index -> replacement port.

    Returns:
        A copy of the definition with overridden ports applied.
    """
    if not overrides:
        return app

    ports = []
    for index, port_def in enumerate(app.ports):
        if index in overrides:
            logger.debug(f"Overriding port {index}: {port_def.port} -> {overrides[index]}")
            port_def = replace(port_def, port=overrides[index])
        ports.append(port_def)

    return replace(app, ports=ports)
