"""
Engine Errors - Failure kinds raised by the game aggregate.

Hierarchy:
- GameError (base, carries an ErrorCode)
  - InvalidArgument
  - IllegalStateTransition
    - RoleDenied
  - CapacityExceeded
  - Conflict
  - NotFound
  - ResourceExhausted

All failures are raised synchronously and leave the aggregate untouched.
None are retried by the engine.
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    ILLEGAL_STATE_TRANSITION = "ILLEGAL_STATE_TRANSITION"
    ROLE_DENIED = "ROLE_DENIED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"


class GameError(Exception):
    """Base exception for all rule violations."""
    code: ErrorCode = ErrorCode.INVALID_ARGUMENT
    retryable: bool = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgument(GameError, ValueError):
    code = ErrorCode.INVALID_ARGUMENT


class IllegalStateTransition(GameError):
    code = ErrorCode.ILLEGAL_STATE_TRANSITION


class RoleDenied(IllegalStateTransition):
    """The acting player's role does not allow the operation."""
    code = ErrorCode.ROLE_DENIED


class CapacityExceeded(GameError):
    code = ErrorCode.CAPACITY_EXCEEDED


class Conflict(GameError):
    code = ErrorCode.CONFLICT


class NotFound(GameError, LookupError):
    code = ErrorCode.NOT_FOUND


class ResourceExhausted(GameError):
    code = ErrorCode.RESOURCE_EXHAUSTED
