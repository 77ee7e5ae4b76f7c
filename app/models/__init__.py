from .analysis import (
    AdCopy,
    VideoAnalysisResult,
    ImageAnalysisResult,
    MediaAnalysisResult,
    RemoteFileHandle,
    AnalysisItem,
    parse_media_result,
)

__all__ = [
    "AdCopy",
    "VideoAnalysisResult",
    "ImageAnalysisResult",
    "MediaAnalysisResult",
    "RemoteFileHandle",
    "AnalysisItem",
    "parse_media_result",
]
