"""
marathon2consul - Register Marathon applications as Consul services.

Translates a Marathon application definition into Consul agent service
registrations (names, tags, meta, weights, health checks) and applies them.

Architecture:
- core/: Domain entities, translation engine and ports (pure, no I/O)
- adapters/: Marathon and Consul HTTP clients, config providers
- application/: Sync orchestration
- cli/: Command line interface
"""

__version__ = "1.0.0"

from .core.domain import (
    ApplicationDefinition,
    CheckDescriptor,
    HealthCheckSpec,
    PortDefinition,
    ServiceRegistration,
    ServiceWeights,
    TranslationWarning,
)
from .core.exceptions import DefinitionError
from .core.translation import TranslationResult, frozen_clock, translate


__all__ = [
    "__version__",
    "ApplicationDefinition",
    "CheckDescriptor",
    "HealthCheckSpec",
    "PortDefinition",
    "ServiceRegistration",
    "ServiceWeights",
    "TranslationWarning",
    "DefinitionError",
    "TranslationResult",
    "frozen_clock",
    "translate",
]
