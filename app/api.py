"""
FastAPI service for ad media analysis.

POST /api/analyze-video accepts an uploaded video or image (multipart) or a
reference to an already stored file (JSON), describes it with the
media-understanding model and returns the result enriched with generated
ad copy.
"""
from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Optional
import logging

from app.config import get_settings
from app.constants import UploadEventType
from app.core.auth import verify_api_key
from app.core.dependencies import (
    get_blob_storage,
    get_copy_client,
    get_media_client,
    get_optional_blob_storage,
)
from app.core.workflow import process_blob, process_reference, process_upload
from app.schemas import (
    AnalyzeByReferenceRequest,
    HealthResponse,
    ServiceInfo,
    UploadCompletedPayload,
    UploadCompletedResponse,
    UploadEvent,
    UploadTokenPayload,
    UploadTokenResponse,
)
from app.services.blob_storage import BlobStorage
from app.services.copywriter import CopyGenerationClient
from app.services.gemini import MediaAnalysisClient
from app.utils.api_helpers import APIError
from app.utils.media import classify_media

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Ad Media Analyzer API",
    description="Describes ad videos and images and writes ad copy for them",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ERROR BODIES
# ============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})


def _describe_validation_error(exc: Exception) -> str:
    errors = exc.errors() if hasattr(exc, "errors") else []
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/", response_model=ServiceInfo)
async def root():
    """Root endpoint to check that the API is up."""
    return ServiceInfo(
        message="Ad Media Analyzer API",
        version="1.0.0",
        endpoints={
            "analyze": "/api/analyze-video",
            "upload": "/api/upload",
            "health": "/health",
            "docs": "/docs",
        },
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health endpoint reporting which providers are configured."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        gemini_configured=bool(settings.gemini_api_key),
        openai_configured=bool(settings.openai_api_key),
        blob_storage_configured=bool(settings.blob_bucket),
    )


async def _read_analyze_request(request: Request) -> Dict[str, Any]:
    """Normalize a multipart upload or a JSON reference into one dict."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise HTTPException(status_code=400, detail="No file provided")
        return {
            "upload": upload,
            "mime_type": form.get("mimeType") or upload.content_type,
            "file_name": form.get("fileName") or upload.filename,
        }

    try:
        body = AnalyzeByReferenceRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    if not (body.blob_url or body.file_uri) or not body.mime_type:
        raise HTTPException(status_code=400, detail="Missing blob URL or mime type")

    return {
        "blob_url": body.blob_url,
        "file_uri": body.file_uri,
        "mime_type": body.mime_type,
        "file_name": body.file_name,
    }


async def validated_analyze_request(request: Request) -> Dict[str, Any]:
    """Parsed analyze request with a checked media kind; resolved before any provider client."""
    data = await _read_analyze_request(request)
    try:
        data["kind"] = classify_media(data["mime_type"])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return data


@app.post("/api/analyze-video", dependencies=[Depends(verify_api_key)])
async def analyze_video(
    data: Dict[str, Any] = Depends(validated_analyze_request),
    media_client: MediaAnalysisClient = Depends(get_media_client),
    copy_client: Optional[CopyGenerationClient] = Depends(get_copy_client),
    blob_storage: Optional[BlobStorage] = Depends(get_optional_blob_storage),
):
    """
    Analyze a video or image.

    Accepts either a multipart ``file`` upload or a JSON body
    ``{blobUrl | fileUri, mimeType, fileName}``.

    Returns:
        Video: ``{transcript, description, scenes, claudeAdCopy?}``
        Image: ``{description, adCopy, visualElements, claudeAdCopy?}``

    Raises:
        HTTPException: 400 for invalid input, 500 if the analysis fails
    """
    mime_type = data["mime_type"]
    kind = data["kind"]
    settings = get_settings()

    try:
        logger.info(f"[API] Analyzing {kind.value} {data.get('file_name')!r} ({mime_type})")

        if data.get("upload") is not None:
            content = await data["upload"].read()
            result = await process_upload(
                content,
                data["file_name"],
                mime_type,
                media_client,
                copy_client,
                temp_dir=settings.temp_dir,
            )
        elif data.get("blob_url"):
            if blob_storage is None:
                raise HTTPException(status_code=500, detail="BLOB_BUCKET not configured in environment variables")
            result = await process_blob(
                data["blob_url"],
                data["file_name"],
                mime_type,
                media_client,
                copy_client,
                blob_storage,
                temp_dir=settings.temp_dir,
            )
        else:
            result = await process_reference(
                data["file_uri"], mime_type, media_client, copy_client
            )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except APIError as e:
        logger.error(f"[API] Error processing media: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"[API] Unexpected error processing media: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to process media: {e}")

    return result.to_response()


@app.post("/api/upload", dependencies=[Depends(verify_api_key)])
async def handle_upload(event: UploadEvent, blob_storage: BlobStorage = Depends(get_blob_storage)):
    """
    Direct-to-storage upload handshake.

    ``blob.generate-client-token`` returns a presigned POST for the file;
    ``blob.upload-completed`` confirms the object landed in the bucket.
    """
    try:
        if event.type == UploadEventType.GENERATE_CLIENT_TOKEN:
            payload = UploadTokenPayload.model_validate(event.payload)
            token = blob_storage.issue_upload_token(
                payload.pathname, payload.content_type, payload.size
            )
            return UploadTokenResponse(
                url=token["url"],
                fields=token["fields"],
                key=token["key"],
                blob_url=token["blobUrl"],
            ).model_dump(by_alias=True)

        payload = UploadCompletedPayload.model_validate(event.payload)
        blob_storage.confirm_upload(payload.key)
        return UploadCompletedResponse().model_dump(mode="json")

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_describe_validation_error(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except APIError as e:
        logger.error(f"[API] Upload error: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/gemini-config", dependencies=[Depends(verify_api_key)])
async def gemini_config():
    """Hand the Gemini key to a trusted client for direct Files API uploads."""
    settings = get_settings()
    if not settings.expose_provider_key:
        raise HTTPException(status_code=404, detail="Not found")
    if not settings.gemini_api_key:
        raise HTTPException(status_code=500, detail="Gemini API key not configured")
    return {"apiKey": settings.gemini_api_key}
