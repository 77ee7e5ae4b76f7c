"""
Enumeration classes for the application.

All enum types used throughout the application for type safety and validation.
"""

from enum import Enum
from typing import Optional


class MediaKind(str, Enum):
    """
    Kind of submitted media, derived from the MIME type prefix.

    - VIDEO: any ``video/*`` type
    - IMAGE: any ``image/*`` type
    """
    VIDEO = "video"
    IMAGE = "image"

    @classmethod
    def from_mime_type(cls, mime_type: Optional[str]) -> Optional["MediaKind"]:
        """Returns the kind for a MIME type, or None if it is neither video nor image."""
        if not mime_type:
            return None
        normalized = mime_type.strip().lower()
        if normalized.startswith("video/"):
            return cls.VIDEO
        if normalized.startswith("image/"):
            return cls.IMAGE
        return None


class AnalysisStatus(str, Enum):
    """
    Lifecycle status of a submitted analysis item.

    - PENDING: Item created, upload in progress
    - PROCESSING: Remote analysis in flight
    - COMPLETED: Analysis finished, item carries its result
    - ERROR: Analysis failed, item carries the error message
    """
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _STATUS_RANKS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (AnalysisStatus.COMPLETED, AnalysisStatus.ERROR)

    def can_transition_to(self, other: "AnalysisStatus") -> bool:
        """Transitions only move forward; terminal states never change."""
        if self.is_terminal:
            return False
        return other.rank > self.rank


_STATUS_RANKS = {
    AnalysisStatus.PENDING: 0,
    AnalysisStatus.PROCESSING: 1,
    AnalysisStatus.COMPLETED: 2,
    AnalysisStatus.ERROR: 2,
}


class RemoteFileState(str, Enum):
    """
    Processing state of a file uploaded to the media-understanding provider.

    Mirrors the provider's file states. Only ACTIVE files may be used in a
    generation request.
    """
    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"

    @classmethod
    def parse(cls, value) -> "RemoteFileState":
        """Accepts provider enums, plain strings or None."""
        raw = getattr(value, "value", value)
        if raw is None:
            return cls.STATE_UNSPECIFIED
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.STATE_UNSPECIFIED


class UploadEventType(str, Enum):
    """Event types accepted by the blob upload endpoint."""
    GENERATE_CLIENT_TOKEN = "blob.generate-client-token"
    UPLOAD_COMPLETED = "blob.upload-completed"
