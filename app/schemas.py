from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.constants import UploadEventType


class AnalyzeByReferenceRequest(BaseModel):
    """JSON body of /api/analyze-video for media that is already stored."""
    model_config = ConfigDict(populate_by_name=True)

    blob_url: Optional[str] = Field(default=None, alias="blobUrl")
    file_uri: Optional[str] = Field(default=None, alias="fileUri")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    file_name: Optional[str] = Field(default=None, alias="fileName")


class UploadTokenPayload(BaseModel):
    pathname: str
    content_type: str = Field(alias="contentType")
    size: Optional[int] = None


class UploadCompletedPayload(BaseModel):
    key: str


class UploadEvent(BaseModel):
    """Body of /api/upload: a typed event with its payload."""
    type: UploadEventType
    payload: Dict[str, Any] = Field(default_factory=dict)


class UploadTokenResponse(BaseModel):
    url: str
    fields: Dict[str, str]
    key: str
    blob_url: str = Field(serialization_alias="blobUrl")


class UploadCompletedResponse(BaseModel):
    type: UploadEventType = UploadEventType.UPLOAD_COMPLETED
    response: str = "ok"


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    gemini_configured: bool
    openai_configured: bool
    blob_storage_configured: bool


class ServiceInfo(BaseModel):
    message: str
    version: str
    endpoints: Dict[str, str]
    media_types: List[str] = Field(default_factory=lambda: ["video/*", "image/*"])
