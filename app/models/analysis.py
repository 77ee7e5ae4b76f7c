from datetime import datetime
from typing import Any, Dict, List, Optional, Union
import time
import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.constants import AnalysisStatus, MediaKind, RemoteFileState


# ============================================================================
# GENERATED CONTENT
# ============================================================================

class AdCopy(BaseModel):
    """Headline and primary text written by the copy model."""
    headline: str
    description: str


class VideoAnalysisResult(BaseModel):
    """Transcript, description and scene breakdown of a video."""
    model_config = ConfigDict(populate_by_name=True)

    transcript: str
    description: str
    scenes: List[str] = Field(default_factory=list)
    generated_ad_copy: Optional[AdCopy] = Field(default=None, alias="claudeAdCopy")

    @property
    def kind(self) -> MediaKind:
        return MediaKind.VIDEO

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ImageAnalysisResult(BaseModel):
    """Description, on-image text and marketing tags of an image."""
    model_config = ConfigDict(populate_by_name=True)

    description: str
    ad_copy: List[str] = Field(default_factory=list, alias="adCopy")
    visual_elements: List[str] = Field(default_factory=list, alias="visualElements")
    generated_ad_copy: Optional[AdCopy] = Field(default=None, alias="claudeAdCopy")

    @property
    def kind(self) -> MediaKind:
        return MediaKind.IMAGE

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


MediaAnalysisResult = Union[VideoAnalysisResult, ImageAnalysisResult]


def parse_media_result(kind: MediaKind, data: Dict[str, Any]) -> MediaAnalysisResult:
    """Build the result type matching ``kind`` from a response payload."""
    if kind == MediaKind.VIDEO:
        return VideoAnalysisResult.model_validate(data)
    return ImageAnalysisResult.model_validate(data)


# ============================================================================
# PROVIDER FILE HANDLE
# ============================================================================

class RemoteFileHandle(BaseModel):
    """
    File uploaded to the media-understanding provider.

    Transient: lives for the duration of one analysis call. Must not be
    used in a generation request until ``state`` is ACTIVE.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    uri: Optional[str] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    state: RemoteFileState = RemoteFileState.STATE_UNSPECIFIED
    size_bytes: Optional[int] = Field(default=None, alias="sizeBytes")

    @classmethod
    def from_provider(cls, remote_file: Any) -> "RemoteFileHandle":
        """Convert a provider file object (SDK type or duck-typed) into a handle."""
        size = getattr(remote_file, "size_bytes", None)
        return cls(
            name=getattr(remote_file, "name", None),
            uri=getattr(remote_file, "uri", None),
            mime_type=getattr(remote_file, "mime_type", None),
            state=RemoteFileState.parse(getattr(remote_file, "state", None)),
            size_bytes=int(size) if size is not None else None,
        )

    @property
    def is_active(self) -> bool:
        return self.state == RemoteFileState.ACTIVE


# ============================================================================
# CLIENT-SIDE ANALYSIS ITEM
# ============================================================================

def _now_ms() -> int:
    return int(time.time() * 1000)


class AnalysisItem(BaseModel):
    """
    One user submission as persisted in the client-side result cache.

    Schema:
    {
        "id": "3f1c...",
        "timestamp": 1733479200000,
        "fileName": "spot.mp4",
        "type": "video",
        "status": "completed",
        "result": {"transcript": "...", "description": "...", "scenes": [...]},
        "error": null
    }

    A completed item always carries exactly one result whose kind matches
    ``type``; an error item carries a message and never a result; pending
    and processing items carry neither.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: int = Field(default_factory=_now_ms, description="Creation time (epoch ms)")
    file_name: str = Field(alias="fileName")
    type: MediaKind
    status: AnalysisStatus = AnalysisStatus.PENDING
    result: Optional[MediaAnalysisResult] = None
    error: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_result(cls, data: Any) -> Any:
        # The union is ambiguous for plain dicts, so the type tag decides.
        if isinstance(data, dict):
            result = data.get("result")
            kind = data.get("type")
            if isinstance(result, dict) and kind is not None:
                data = dict(data)
                data["result"] = parse_media_result(MediaKind(kind), result)
        return data

    @model_validator(mode="after")
    def _check_payload(self) -> "AnalysisItem":
        if self.status == AnalysisStatus.COMPLETED:
            if self.result is None:
                raise ValueError("completed item requires a result")
            if self.result.kind != self.type:
                raise ValueError(
                    f"result kind '{self.result.kind.value}' does not match item type '{self.type.value}'"
                )
            if self.error is not None:
                raise ValueError("completed item cannot carry an error")
        elif self.status == AnalysisStatus.ERROR:
            if self.result is not None:
                raise ValueError("error item cannot carry a result")
            if not self.error:
                raise ValueError("error item requires an error message")
        elif self.result is not None or self.error is not None:
            raise ValueError(f"{self.status.value} item cannot carry a result or an error")
        return self

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000)

    def transition(
        self,
        status: AnalysisStatus,
        result: Optional[MediaAnalysisResult] = None,
        error: Optional[str] = None,
    ) -> "AnalysisItem":
        """
        Return a copy of the item moved to ``status``.

        Raises:
            ValueError: If the transition goes backward or leaves a terminal state
        """
        if not self.status.can_transition_to(status):
            raise ValueError(
                f"Invalid transition for item {self.id}: {self.status.value} -> {status.value}"
            )
        return AnalysisItem(
            id=self.id,
            timestamp=self.timestamp,
            file_name=self.file_name,
            type=self.type,
            status=status,
            result=result,
            error=error,
        )

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
