"""
Store exceptions.

Hierarchy:
- StoreError (base for all store exceptions)
  - GameNotFound
  - CorruptRecord
"""

from ..engine_core.errors import NotFound


class StoreError(Exception):
    """Base exception for all store-related errors."""
    retryable: bool = True


class GameNotFound(StoreError, NotFound):
    retryable = False


class CorruptRecord(StoreError):
    """A stored game references data that is not there."""
    retryable = False
