"""
Application layer - Use cases built on the core ports.
"""

from .sync import FailedOperation, SyncOrchestrator, SyncResult


__all__ = ["FailedOperation", "SyncOrchestrator", "SyncResult"]
