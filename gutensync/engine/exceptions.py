from typing import Any


class GutenSyncError(Exception):
    """Base exception for all gutensync errors."""

    def __init__(self, message: str):
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {"detail": str(self)}


class CollaboratorError(GutenSyncError):
    """Raised by an external collaborator (rich text, media, embeds) when it cannot do its job."""


class EmbedResolutionError(CollaboratorError):
    """Raised when embed preview metadata cannot be resolved for a URL."""

    def __init__(self, url: str, reason: str, *, message: str | None = None):
        super().__init__(message or f"Could not resolve embed preview for {url!r}: {reason}")
        self.url = url
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "url": self.url, "reason": self.reason}


class AttachmentImportError(CollaboratorError):
    """Raised when a media file cannot be downloaded or stored."""

    def __init__(self, source_url: str, reason: str, *, message: str | None = None):
        super().__init__(message or f"Could not import attachment {source_url!r}: {reason}")
        self.source_url = source_url
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "source_url": self.source_url, "reason": self.reason}
