"""Session orchestration and exception handling."""

from nuget_switch.core.exceptions import (
    NuGetSwitchError,
    InvalidArgumentError,
    NotFoundError,
    KeyNotFoundError,
    IOFailureError,
    OperationError,
    GitOperationError,
    SessionStateError,
)

__all__ = [
    "NuGetSwitchError",
    "InvalidArgumentError",
    "NotFoundError",
    "KeyNotFoundError",
    "IOFailureError",
    "OperationError",
    "GitOperationError",
    "SessionStateError",
]
