"""Custom exceptions for NuGet Switch."""


class NuGetSwitchError(Exception):
    """Base exception for all NuGet Switch errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidArgumentError(NuGetSwitchError, ValueError):
    """A required string was blank or a required list was empty."""

    def __init__(self, message: str, argument: str | None = None):
        super().__init__(message, details={"argument": argument} if argument else None)
        self.argument = argument


class NotFoundError(NuGetSwitchError):
    """A referenced file does not exist."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, details={"path": path} if path else None)
        self.path = path


class KeyNotFoundError(NuGetSwitchError, KeyError):
    """An operation referenced a package id that was never registered."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message, details={"key": key} if key else None)
        self.key = key


class IOFailureError(NuGetSwitchError):
    """Reading, parsing or writing a file failed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, details={"path": path} if path else None)
        self.path = path


class OperationError(NuGetSwitchError):
    """A bulk operation over the solution was aborted."""

    def __init__(
        self,
        message: str,
        messages: list[str] | None = None,
        failures: list[str] | None = None,
    ):
        super().__init__(
            message,
            details={"failure_count": len(failures)} if failures else None,
        )
        self.messages = messages or []
        self.failures = failures or []


class GitOperationError(NuGetSwitchError):
    """Error during Git operations."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        stderr: str | None = None,
    ):
        super().__init__(
            message,
            details={"command": command, "stderr": stderr},
        )
        self.command = command
        self.stderr = stderr


class SessionStateError(NuGetSwitchError):
    """An operation needs an open (or closed) solution."""
