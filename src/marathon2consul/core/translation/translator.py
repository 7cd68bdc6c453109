"""
Translator - Marathon application definition to Consul registrations.

This is the entry point of the core: a pure function of the definition,
the port overrides and the clock. It performs no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..domain.entities import ApplicationDefinition, ServiceRegistration
from ..domain.value_objects import TranslationWarning
from ..exceptions import DefinitionError
from .assembler import assemble_services
from .clock import Clock, utc_now
from .health_checks import map_health_checks
from .overrides import apply_port_overrides
from .tags import global_tags


logger = logging.getLogger("marathon2consul.core.translator")


@dataclass
class TranslationResult:
    """
    Output of one translation.

    Attributes:
        app_id: Id of the translated application.
        registrations: Registrations in port definition order.
        warnings: Per-entry anomalies that were skipped.
    """

    app_id: str
    registrations: list[ServiceRegistration] = field(default_factory=list)
    warnings: list[TranslationWarning] = field(default_factory=list)

    @property
    def service_ids(self) -> list[str]:
        """Ids of all registrations."""
        return [r.id for r in self.registrations]

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "app_id": self.app_id,
            "registrations": [r.to_dict() for r in self.registrations],
            "warnings": [
                {"code": w.code, "message": w.message, "context": w.context}
                for w in self.warnings
            ],
        }


def translate(
    app: ApplicationDefinition,
    overrides: Mapping[int, int] | None = None,
    clock: Clock = utc_now,
) -> TranslationResult:
    """
    Translate a Marathon application into Consul registrations.

    Args:
        app: The application definition. It is not modified.
        overrides: Port-list index -> replacement port.
        clock: Time source; read once for the global tags and once per
            registration for the `start` meta.

    Returns:
        TranslationResult with registrations and warnings.

    Raises:
        DefinitionError: If the definition has no id.
    """
    if not app.id:
        raise DefinitionError("Application definition has no id")

    warnings: list[TranslationWarning] = []

    resolved = apply_port_overrides(app, overrides)
    tags = global_tags(resolved, clock())
    checks, port_tags = map_health_checks(resolved, warnings)
    registrations = assemble_services(resolved, tags, checks, port_tags, clock, warnings)

    logger.debug(
        f"Translated {app.id}: {len(registrations)} registration(s), "
        f"{len(checks)} check(s), {len(warnings)} warning(s)"
    )

    return TranslationResult(app_id=app.id, registrations=registrations, warnings=warnings)


class ServiceTranslator:
    """
    Translator bound to a fixed override map and clock.

    Used by the sync orchestrator so repeated syncs of the same app apply
    the same operator configuration.
    """

    def __init__(
        self,
        overrides: Mapping[int, int] | None = None,
        clock: Clock = utc_now,
    ):
        self.overrides = dict(overrides or {})
        self.clock = clock

    def translate(self, app: ApplicationDefinition) -> TranslationResult:
        """Translate one definition."""
        return translate(app, self.overrides, self.clock)
