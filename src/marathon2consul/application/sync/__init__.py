"""
Sync - Fetch, translate and register one Marathon application.
"""

from .orchestrator import FailedOperation, SyncOrchestrator, SyncResult


__all__ = ["FailedOperation", "SyncOrchestrator", "SyncResult"]
