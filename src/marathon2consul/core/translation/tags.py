"""
Global Tag Builder - Tags shared by every registration of one definition.
"""

from __future__ import annotations

from datetime import datetime

from ..domain.entities import ApplicationDefinition
from .clock import format_timestamp


CTAGS_LABEL = "ctags"
REQUIRE_PORT_TAG = "marathon-requirePort"


def global_tags(app: ApplicationDefinition, now: datetime) -> list[str]:
    """
    Build the tags applied to all registrations of a definition.

    Order: start marker, owning user (if any), port-requirement flag (if set).
    """
    tags = [f"marathon-start-{format_timestamp(now)}"]

    if app.user:
        tags.append(f"marathon-user-{app.user}")
    if app.require_ports:
        tags.append(REQUIRE_PORT_TAG)

    return tags


def split_ctags(value: str) -> list[str]:
    """Split a comma separated `ctags` label. Empty items are kept."""
    if not value:
        return []
    return value.split(",")
