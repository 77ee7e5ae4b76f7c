from .cache import LocalStorage, ResultCache
from .submitter import AnalysisSubmitter, SubmissionError

__all__ = [
    "LocalStorage",
    "ResultCache",
    "AnalysisSubmitter",
    "SubmissionError",
]
