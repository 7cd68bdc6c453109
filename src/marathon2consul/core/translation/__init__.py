"""
Translation - The Marathon to Consul derivation engine.

Pipeline:
- overrides: apply operator port overrides
- tags: global tags shared by all registrations
- health_checks: Marathon health checks to Consul checks and port tags
- metadata: labels to service meta and weights
- assembler: one registration per eligible port
"""

from .assembler import app_name, assemble_services, default_app_name, sanitize_name, service_id
from .clock import Clock, format_duration, format_timestamp, frozen_clock, utc_now
from .health_checks import map_health_checks, resolve_check_port
from .metadata import format_meta, service_meta, service_weights
from .overrides import apply_port_overrides
from .tags import global_tags, split_ctags
from .translator import ServiceTranslator, TranslationResult, translate


__all__ = [
    # Entry point
    "translate",
    "ServiceTranslator",
    "TranslationResult",
    # Stages
    "apply_port_overrides",
    "global_tags",
    "split_ctags",
    "map_health_checks",
    "resolve_check_port",
    "format_meta",
    "service_meta",
    "service_weights",
    "assemble_services",
    "app_name",
    "default_app_name",
    "sanitize_name",
    "service_id",
    # Clock
    "Clock",
    "utc_now",
    "frozen_clock",
    "format_timestamp",
    "format_duration",
]
