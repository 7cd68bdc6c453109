"""
Marathon Adapter - Integration with Mesosphere Marathon.
"""

from marathon2consul.adapters.marathon.adapter import MarathonAdapter
from marathon2consul.adapters.marathon.client import MarathonApiClient


__all__ = ["MarathonAdapter", "MarathonApiClient"]
