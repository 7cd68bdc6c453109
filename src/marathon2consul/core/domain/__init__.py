"""
Domain Layer - Marathon definitions, Consul registrations and value objects.
"""

from .entities import (
    ApplicationDefinition,
    HealthCheckSpec,
    PortDefinition,
    ServiceRegistration,
)
from .enums import CheckKind, HealthCheckProtocol
from .value_objects import CheckDescriptor, ServiceWeights, TranslationWarning


# Port-list index -> replacement port
OverrideConfig = dict[int, int]


__all__ = [
    # Entities
    "ApplicationDefinition",
    "HealthCheckSpec",
    "PortDefinition",
    "ServiceRegistration",
    # Enums
    "CheckKind",
    "HealthCheckProtocol",
    # Value objects
    "CheckDescriptor",
    "ServiceWeights",
    "TranslationWarning",
    "OverrideConfig",
]
