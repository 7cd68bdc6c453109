"""
Metadata & Weight Extractor - Labels to Consul service meta and weights.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime

from ..domain.entities import ApplicationDefinition, PortDefinition
from ..domain.value_objects import ServiceWeights, TranslationWarning
from .clock import format_timestamp


logger = logging.getLogger("marathon2consul.core.metadata")

# Consul limits
MAX_META_KEY_LENGTH = 128
MAX_META_VALUE_LENGTH = 512

WEIGHT_LABEL = "weight"
RENAMED_WEIGHT_KEY = "original_weight"
DEFAULT_PASSING_WEIGHT = 10

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def format_meta(key: str, value: str) -> tuple[str, str] | None:
    """
    Filter and rename one label for use as Consul service meta.

    Returns:
        The (key, value) pair to store, or None if the label is rejected.
    """
    # Consul meta keys are ASCII
    if not key.isascii():
        return None
    if len(key.encode("utf-8")) > MAX_META_KEY_LENGTH:
        return None
    if len(value.encode("utf-8")) > MAX_META_VALUE_LENGTH:
        return None

    key = key.replace(".", "_")

    # Keys reserved by Consul
    if key.lower().startswith("consul_"):
        return None
    if key.startswith("DNS_ENTRY"):
        return None
    if key.lower() == "deregister_critical_service_after":
        return None

    if key == WEIGHT_LABEL:
        key = RENAMED_WEIGHT_KEY

    return key, value


def _merge_labels(meta: dict[str, str], labels: Mapping[str, str] | None) -> None:
    if labels is None:
        return
    for key, value in labels.items():
        formatted = format_meta(key, value)
        if formatted is not None:
            meta[formatted[0]] = formatted[1]


def service_meta(
    app: ApplicationDefinition,
    port_def: PortDefinition,
    now: datetime,
) -> dict[str, str]:
    """
    Build the service meta of one registration.

    Application labels are merged first, port labels second, so a port
    label wins over an application label with the same key.
    """
    meta = {
        "marathon_app_version": app.version,
        "start": format_timestamp(now),
    }
    _merge_labels(meta, app.labels)
    _merge_labels(meta, port_def.labels)
    return meta


def _parse_weight(value: str) -> int | None:
    if not _INTEGER_RE.fullmatch(value):
        return None
    return int(value)


def service_weights(
    app: ApplicationDefinition,
    port_def: PortDefinition,
    warnings: list[TranslationWarning],
) -> ServiceWeights:
    """
    Derive the service weights from the raw `weight` label.

    The application label is read first and the port label second; the last
    valid integer wins. Invalid values are reported and ignored.
    """
    passing = DEFAULT_PASSING_WEIGHT

    for scope, labels in (("app", app.labels), ("port", port_def.labels)):
        if labels is None or WEIGHT_LABEL not in labels:
            continue
        raw = labels[WEIGHT_LABEL]
        parsed = _parse_weight(raw)
        if parsed is None:
            message = f"Error parsing {scope} weight '{raw}': not an integer"
            logger.warning(message)
            warnings.append(
                TranslationWarning(
                    code=TranslationWarning.BAD_WEIGHT,
                    message=message,
                    context={"scope": scope, "value": raw, "port_name": port_def.name},
                )
            )
            continue
        passing = parsed

    return ServiceWeights.from_passing(passing)
