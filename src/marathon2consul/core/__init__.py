"""
Core module - Pure domain logic with no external dependencies.

This module contains:
- domain/: Marathon definitions, Consul registrations, value objects
- translation/: The derivation engine (definition -> registrations)
- ports/: Abstract interfaces that adapters must implement
- exceptions: Core exception hierarchy
"""

from .domain import *
from .exceptions import ConfigError, DefinitionError, Marathon2ConsulError
from .ports import *
from .translation import ServiceTranslator, TranslationResult, translate
