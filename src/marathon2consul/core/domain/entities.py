"""
Domain Entities - Marathon application definitions and Consul registrations.

The Marathon side (ApplicationDefinition, PortDefinition, HealthCheckSpec)
is read-only input to the translator. The Consul side (ServiceRegistration)
is its output.

Optional Marathon fields are modelled as None rather than zero values:
- PortDefinition.port: None means "no port assigned"
- HealthCheckSpec.port / port_index: None means "not set"
- labels: None means "no label map"; label() reads it as empty
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import DefinitionError
from .enums import HealthCheckProtocol
from .value_objects import CheckDescriptor, ServiceWeights


def _optional_int(value: Any, field_name: str, app_id: str | None) -> int | None:
    """Read an optional integer field of a Marathon document."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise DefinitionError(
            f"Field '{field_name}' must be an integer, got {value!r}",
            app_id=app_id,
        )
    return value


def _lenient_int(value: Any) -> int | None:
    """Read an optional integer of a health check; anything else counts as unset."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _labels(value: Any, field_name: str, app_id: str | None) -> dict[str, str] | None:
    """Read an optional label map, stringifying values."""
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise DefinitionError(f"Field '{field_name}' must be a mapping", app_id=app_id)
    return {str(k): str(v) for k, v in value.items()}


def _list(value: Any, field_name: str, app_id: str | None) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DefinitionError(f"Field '{field_name}' must be a list", app_id=app_id)
    return value


@dataclass
class PortDefinition:
    """One declared network port of a Marathon application."""

    port: int | None = None
    name: str = ""
    labels: dict[str, str] | None = None

    def label(self, key: str) -> str:
        """Get a port label, empty string when absent."""
        if self.labels is None:
            return ""
        return self.labels.get(key, "")

    @property
    def has_port(self) -> bool:
        """Check if a usable (positive) port is assigned."""
        return self.port is not None and self.port > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], app_id: str | None = None) -> PortDefinition:
        """Parse a Marathon `portDefinitions` entry."""
        if not isinstance(data, Mapping):
            raise DefinitionError("Port definition must be a mapping", app_id=app_id)
        return cls(
            port=_optional_int(data.get("port"), "portDefinitions.port", app_id),
            name=str(data.get("name") or ""),
            labels=_labels(data.get("labels"), "portDefinitions.labels", app_id),
        )


@dataclass
class HealthCheckSpec:
    """A Marathon health check."""

    protocol: HealthCheckProtocol = HealthCheckProtocol.HTTP
    raw_protocol: str = "HTTP"
    port: int | None = None
    port_index: int | None = None
    path: str | None = None
    timeout_seconds: int = 20
    interval_seconds: int = 60

    def summary(self) -> str:
        """Short human-readable description used in check notes."""
        parts = [f"protocol={self.raw_protocol}"]
        if self.port is not None:
            parts.append(f"port={self.port}")
        if self.port_index is not None:
            parts.append(f"portIndex={self.port_index}")
        if self.path is not None:
            parts.append(f"path={self.path}")
        parts.append(f"timeoutSeconds={self.timeout_seconds}")
        parts.append(f"intervalSeconds={self.interval_seconds}")
        return "{" + " ".join(parts) + "}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], app_id: str | None = None) -> HealthCheckSpec:
        """
        Parse a Marathon `healthChecks` entry.

        Malformed fields never reject the application: a non-integer port or
        portIndex is read as unset (the mapper then drops the check), and a
        non-integer timeout or interval falls back to the Marathon default.
        """
        if not isinstance(data, Mapping):
            raise DefinitionError("Health check must be a mapping", app_id=app_id)
        raw_protocol = str(data.get("protocol") or "HTTP")
        path = data.get("path")
        timeout = _lenient_int(data.get("timeoutSeconds"))
        interval = _lenient_int(data.get("intervalSeconds"))
        # Marathon defaults
        return cls(
            protocol=HealthCheckProtocol.from_string(raw_protocol),
            raw_protocol=raw_protocol,
            port=_lenient_int(data.get("port")),
            port_index=_lenient_int(data.get("portIndex")),
            path=str(path) if path is not None else None,
            timeout_seconds=timeout if timeout is not None else 20,
            interval_seconds=interval if interval is not None else 60,
        )


@dataclass
class ApplicationDefinition:
    """
    A Marathon application definition.

    Only the fields needed to derive Consul registrations are kept.
    Order of `ports` and `health_checks` is significant: the port index is
    the join key for health checks and port overrides.
    """

    id: str
    user: str = ""
    version: str = ""
    require_ports: bool | None = None
    labels: dict[str, str] | None = None
    ports: list[PortDefinition] = field(default_factory=list)
    health_checks: list[HealthCheckSpec] = field(default_factory=list)

    def label(self, key: str) -> str:
        """Get an application label, empty string when absent."""
        if self.labels is None:
            return ""
        return self.labels.get(key, "")

    def has_label(self, key: str) -> bool:
        """Check if the application carries a label, even an empty one."""
        return self.labels is not None and key in self.labels

    @classmethod
    def from_dict(cls, data: Any) -> ApplicationDefinition:
        """
        Parse a Marathon application document (the `app` object of
        `GET /v2/apps/<id>`).

        Raises:
            DefinitionError: If the document is structurally unusable.
        """
        if not isinstance(data, Mapping):
            raise DefinitionError("Application definition must be a mapping")

        app_id = data.get("id")
        if not isinstance(app_id, str) or not app_id:
            raise DefinitionError("Application definition has no id")

        require_ports = data.get("requirePorts")
        return cls(
            id=app_id,
            user=str(data.get("user") or ""),
            version=str(data.get("version") or ""),
            require_ports=bool(require_ports) if require_ports is not None else None,
            labels=_labels(data.get("labels"), "labels", app_id),
            ports=[
                PortDefinition.from_dict(p, app_id)
                for p in _list(data.get("portDefinitions"), "portDefinitions", app_id)
            ],
            health_checks=[
                HealthCheckSpec.from_dict(hc, app_id)
                for hc in _list(data.get("healthChecks"), "healthChecks", app_id)
            ],
        )


@dataclass
class ServiceRegistration:
    """
    A Consul agent service registration derived from one port definition.

    Containers are owned by the registration; no two registrations share
    their tags, meta or checks.
    """

    id: str
    name: str
    port: int
    tags: list[str] = field(default_factory=list)
    meta: dict[str, str] = field(default_factory=dict)
    weights: ServiceWeights = field(default_factory=ServiceWeights)
    checks: list[CheckDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the Consul `/v1/agent/service/register` payload."""
        payload: dict[str, Any] = {
            "ID": self.id,
            "Name": self.name,
            "Port": self.port,
            "Tags": list(self.tags),
            "Meta": dict(self.meta),
            "Weights": self.weights.to_dict(),
        }
        if self.checks:
            payload["Checks"] = [check.to_dict() for check in self.checks]
        return payload
