"""
Value Objects - Immutable objects defined by their attributes.

These are the building blocks the translator emits: check descriptors,
weights and the structured warnings collected during a translation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import CheckKind


@dataclass(frozen=True)
class ServiceWeights:
    """
    Traffic weights of a Consul service.

    Consul uses `passing` while all checks pass and `warning` while at
    least one check is in the warning state.
    """

    passing: int = 10
    warning: int = 2

    @classmethod
    def from_passing(cls, passing: int) -> ServiceWeights:
        """Derive the warning weight from the passing weight."""
        return cls(passing=passing, warning=passing // 10 + 1)

    def to_dict(self) -> dict[str, int]:
        """Convert to the Consul `Weights` payload."""
        return {"Passing": self.passing, "Warning": self.warning}


@dataclass(frozen=True)
class CheckDescriptor:
    """
    A Consul agent check derived from a Marathon health check.

    `port` is the resolved port the check targets; it is used to attach
    the check to the registration of that port and is not sent to Consul.
    """

    name: str
    kind: CheckKind
    target: str
    notes: str
    timeout: str
    interval: str
    port: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to a Consul check payload."""
        return {
            "Name": self.name,
            self.kind.payload_field: self.target,
            "Notes": self.notes,
            "Timeout": self.timeout,
            "Interval": self.interval,
        }


@dataclass(frozen=True)
class TranslationWarning:
    """
    A non-fatal anomaly found while translating a definition.

    Attributes:
        code: Machine readable anomaly code (bad_port, unknown_protocol, bad_weight).
        message: Human readable description.
        context: Extra details such as the health check index or label value.
    """

    code: str
    message: str
    context: dict[str, Any] = field(default_factory=dict, compare=False)

    BAD_PORT = "bad_port"
    UNKNOWN_PROTOCOL = "unknown_protocol"
    BAD_WEIGHT = "bad_weight"

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
