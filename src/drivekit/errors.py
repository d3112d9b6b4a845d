"""
Custom exceptions for drivekit.

The pure helpers (identifiers, processing) never raise for bad input; they
return None or empty results. These exceptions are raised by the pipelines
(input problems) and by the backends (collaborator failures), and are caught
once, at the orchestrator boundary.
"""

from __future__ import annotations

from typing import Any, Optional


class DrivekitError(Exception):
    """Base exception for all drivekit-specific errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# region input errors
class PipelineInputError(DrivekitError):
    """The user-supplied input for a pipeline is unusable. Reported, not logged as a crash."""


class InputMissingError(PipelineInputError):
    """A required input cell or setting is empty."""


class IdentifierNotFoundError(PipelineInputError):
    """No resource ID could be extracted from an input URL."""

    def __init__(self, message: str, slot: str, url: str) -> None:
        super().__init__(message, {"slot": slot, "url": url})
        self.slot = slot
        self.url = url

    def __str__(self) -> str:
        # The URL may be long and the message already names the slot.
        return self.message


# endregion


# region collaborator errors
class CollaboratorError(DrivekitError):
    """A storage, spreadsheet, or deck call failed (network, permissions, not found)."""


class ResourceNotFoundError(CollaboratorError):
    """The collaborator has no resource with the requested ID."""

    def __init__(self, kind: str, resource_id: str) -> None:
        super().__init__(
            f"{kind} not found: {resource_id}",
            {"kind": kind, "resource_id": resource_id},
        )
        self.kind = kind
        self.resource_id = resource_id


class AuthenticationError(CollaboratorError):
    """Could not obtain credentials for the Google APIs."""


# endregion
