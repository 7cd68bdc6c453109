"""
Domain enums - Health check protocols and Consul check kinds.
"""

from __future__ import annotations

from enum import Enum


class HealthCheckProtocol(Enum):
    """Protocol of a Marathon health check."""

    HTTP = "HTTP"
    HTTPS = "HTTPS"
    MESOS_HTTP = "MESOS_HTTP"
    MESOS_HTTPS = "MESOS_HTTPS"
    TCP = "TCP"
    MESOS_TCP = "MESOS_TCP"
    OTHER = "OTHER"

    @classmethod
    def from_string(cls, value: str | None) -> HealthCheckProtocol:
        """
        Parse a protocol as published by Marathon.

        Matching is exact, Marathon always sends upper case values.
        Anything unrecognized (COMMAND, MESOS_COMMAND, empty) maps to OTHER.
        """
        if not value:
            return cls.OTHER
        for member in cls:
            if member is not cls.OTHER and member.value == value:
                return member
        return cls.OTHER

    @property
    def is_http(self) -> bool:
        """Check if this is one of the HTTP(S) protocols."""
        return self in (
            HealthCheckProtocol.HTTP,
            HealthCheckProtocol.HTTPS,
            HealthCheckProtocol.MESOS_HTTP,
            HealthCheckProtocol.MESOS_HTTPS,
        )

    @property
    def is_tcp(self) -> bool:
        """Check if this is one of the TCP protocols."""
        return self in (HealthCheckProtocol.TCP, HealthCheckProtocol.MESOS_TCP)

    @property
    def is_supported(self) -> bool:
        """Check if the protocol can be mapped to a Consul check."""
        return self.is_http or self.is_tcp

    @property
    def scheme(self) -> str | None:
        """URL scheme used for HTTP checks, None for non-HTTP protocols."""
        if not self.is_http:
            return None
        return "https" if "HTTPS" in self.value else "http"


class CheckKind(Enum):
    """Kind of Consul agent check."""

    HTTP = "http"
    HTTPS = "https"
    TCP = "tcp"

    @property
    def payload_field(self) -> str:
        """Field of the Consul check payload that carries the target."""
        return "TCP" if self is CheckKind.TCP else "HTTP"
