"""
Consul Adapter - Integration with the HashiCorp Consul agent.
"""

from marathon2consul.adapters.consul.adapter import ConsulAdapter
from marathon2consul.adapters.consul.client import ConsulApiClient


__all__ = ["ConsulAdapter", "ConsulApiClient"]
