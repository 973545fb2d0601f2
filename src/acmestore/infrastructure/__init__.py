"""
Infrastructure abstraction layer for storage operations.

This module provides the atomic storage interface and its implementations:
- local: File-based storage with stage-then-publish writes
- memory: Dictionary-backed storage for embedding and tests
"""

from acmestore.infrastructure.factory import InfrastructureFactory

__all__ = ["InfrastructureFactory"]
