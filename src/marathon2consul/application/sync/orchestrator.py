"""
Sync Orchestrator - Coordinates one Marathon to Consul synchronization.

This is the main entry point for sync operations:
fetch the definition, translate it, apply the registrations.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from marathon2consul.core.domain.value_objects import TranslationWarning
from marathon2consul.core.exceptions import DefinitionError
from marathon2consul.core.ports.config_provider import SyncConfig
from marathon2consul.core.ports.orchestrator import OrchestratorError, OrchestratorPort
from marathon2consul.core.ports.service_registry import (
    RegistryError,
    RegistryNotFoundError,
    ServiceRegistryPort,
)
from marathon2consul.core.translation import Clock, ServiceTranslator, TranslationResult, utc_now


@dataclass
class FailedOperation:
    """
    Details of a failed operation during sync.

    Provides context about what failed, where, and why for
    better error reporting and debugging.
    """

    operation: str  # e.g., "register", "deregister"
    service_id: str
    error: str
    recoverable: bool = True

    def __str__(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.operation}] {self.service_id}: {self.error}"


@dataclass
class SyncResult:
    """
    Result of a sync operation with graceful degradation support.

    A failed registration does not stop the others, so a sync can
    partially succeed.

    Attributes:
        app_id: The synchronized application.
        success: Whether the sync completed without any errors.
        dry_run: Whether this was a dry-run (no changes made).
        services_planned: Number of registrations the translation produced.
        services_registered: Number of registrations applied.
        services_deregistered: Number of services removed.
        registered_ids: Ids of applied registrations.
        deregistered_ids: Ids of removed services.
        translation_warnings: Per-entry anomalies skipped by the translator.
        failed_operations: Registry operations that failed.
        errors: Error messages.
    """

    app_id: str = ""
    success: bool = True
    dry_run: bool = True

    services_planned: int = 0
    services_registered: int = 0
    services_deregistered: int = 0

    registered_ids: list[str] = field(default_factory=list)
    deregistered_ids: list[str] = field(default_factory=list)
    translation_warnings: list[TranslationWarning] = field(default_factory=list)
    failed_operations: list[FailedOperation] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error message and mark sync as failed."""
        self.errors.append(error)
        self.success = False

    def add_failed_operation(
        self,
        operation: str,
        service_id: str,
        error: str,
        recoverable: bool = True,
    ) -> None:
        """Add a failed registry operation with context."""
        failed = FailedOperation(
            operation=operation,
            service_id=service_id,
            error=error,
            recoverable=recoverable,
        )
        self.failed_operations.append(failed)
        self.errors.append(str(failed))
        self.success = False

    @property
    def warnings(self) -> list[str]:
        """Translation warnings as messages."""
        return [str(w) for w in self.translation_warnings]

    @property
    def partial_success(self) -> bool:
        """Check if some operations succeeded while others failed."""
        has_successes = self.services_registered > 0 or self.services_deregistered > 0
        return has_successes and bool(self.failed_operations)

    def summary(self) -> str:
        """
        Generate a human-readable summary of the sync result.

        Returns:
            Multi-line summary string.
        """
        lines = []

        if self.dry_run:
            lines.append("DRY RUN - No changes made")

        if self.success:
            lines.append(f"✓ Sync of {self.app_id} completed successfully")
        elif self.partial_success:
            lines.append(f"⚠ Sync completed with errors ({len(self.failed_operations)} failures)")
        else:
            lines.append(f"✗ Sync failed ({len(self.errors)} errors)")

        lines.append(f"  Services planned: {self.services_planned}")
        lines.append(f"  Services registered: {self.services_registered}")
        if self.services_deregistered:
            lines.append(f"  Services deregistered: {self.services_deregistered}")

        if self.failed_operations:
            lines.append("")
            lines.append("Failed operations:")
            for failed in self.failed_operations[:10]:
                lines.append(f"  • {failed}")
            if len(self.failed_operations) > 10:
                lines.append(f"  ... and {len(self.failed_operations) - 10} more")

        if self.translation_warnings:
            lines.append("")
            lines.append("Warnings:")
            for warning in self.translation_warnings[:5]:
                lines.append(f"  • {warning}")
            if len(self.translation_warnings) > 5:
                lines.append(f"  ... and {len(self.translation_warnings) - 5} more")

        return "\n".join(lines)


class SyncOrchestrator:
    """
    Orchestrates the synchronization between Marathon and Consul.

    Phases:
    1. Fetch the application definition from the orchestrator
    2. Translate it into registrations (pure, see core.translation)
    3. Register each registration (or preview in dry-run)
    """

    def __init__(
        self,
        orchestrator: OrchestratorPort,
        registry: ServiceRegistryPort,
        config: SyncConfig,
        clock: Clock = utc_now,
    ):
        """
        Initialize the orchestrator.

        Args:
            orchestrator: Orchestrator port (Marathon)
            registry: Service registry port (Consul)
            config: Sync configuration (port overrides, dry-run)
            clock: Time source passed to the translator
        """
        self.orchestrator = orchestrator
        self.registry = registry
        self.config = config
        self.translator = ServiceTranslator(overrides=config.port_overrides, clock=clock)
        self.logger = logging.getLogger("SyncOrchestrator")

    # -------------------------------------------------------------------------
    # Main Entry Points
    # -------------------------------------------------------------------------

    def plan(self, app_id: str) -> TranslationResult:
        """
        Fetch and translate without touching the registry.

        Raises:
            OrchestratorError: If the definition cannot be fetched
            DefinitionError: If the definition is unusable
        """
        app = self.orchestrator.fetch(app_id)
        result = self.translator.translate(app)
        self.logger.info(
            f"Planned {len(result.registrations)} registration(s) for {app_id}"
        )
        for warning in result.warnings:
            self.logger.debug(f"Translation warning: {warning}")
        return result

    def sync(
        self,
        app_id: str,
        progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> SyncResult:
        """
        Full sync of one application.

        Args:
            app_id: Marathon application id
            progress_callback: Optional callback (service id, current, total)

        Returns:
            SyncResult with sync details
        """
        result = SyncResult(app_id=app_id, dry_run=self.config.dry_run)

        plan = self._plan_or_record(app_id, result)
        if plan is None:
            return result

        total = len(plan.registrations)
        for i, registration in enumerate(plan.registrations, 1):
            if progress_callback:
                progress_callback(registration.id, i, total)
            try:
                self.registry.register(registration)
            except RegistryError as e:
                self.logger.error(f"Failed to register {registration.id}: {e}")
                result.add_failed_operation("register", registration.id, str(e))
                continue
            result.services_registered += 1
            result.registered_ids.append(registration.id)

        return result

    def deregister(self, app_id: str) -> SyncResult:
        """
        Deregister the services the current definition translates to.

        Used when a wrapped task stops. Services unknown to the registry
        are counted as already gone.
        """
        result = SyncResult(app_id=app_id, dry_run=self.config.dry_run)

        plan = self._plan_or_record(app_id, result)
        if plan is None:
            return result

        for service_id in plan.service_ids:
            try:
                self.registry.deregister(service_id)
            except RegistryNotFoundError:
                self.logger.debug(f"Service {service_id} already deregistered")
                continue
            except RegistryError as e:
                self.logger.error(f"Failed to deregister {service_id}: {e}")
                result.add_failed_operation("deregister", service_id, str(e))
                continue
            result.services_deregistered += 1
            result.deregistered_ids.append(service_id)

        return result

    def _plan_or_record(self, app_id: str, result: SyncResult) -> TranslationResult | None:
        try:
            plan = self.plan(app_id)
        except OrchestratorError as e:
            self.logger.error(f"Failed to fetch {app_id}: {e}")
            result.add_error(f"Failed to fetch {app_id} from {self.orchestrator.name}: {e}")
            return None
        except DefinitionError as e:
            self.logger.error(f"Unusable definition for {app_id}: {e}")
            result.add_error(f"Unusable definition for {app_id}: {e}")
            return None

        result.services_planned = len(plan.registrations)
        result.translation_warnings = list(plan.warnings)
        return plan
