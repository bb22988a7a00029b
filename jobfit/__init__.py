from .errors import (
    CorruptDocument,
    DocumentNotFound,
    DocumentUnreadable,
    EmptyDocument,
    MalformedReply,
    MatchingError,
    ResumeError,
    ServiceNotConfigured,
    ServiceTimeout,
    ServiceUnavailable,
    UnsupportedFormat,
)
from .models import DocumentFormat, JobSummary, Recommendation, ResumeDocument
from .pipeline import RecommendationPipeline

__all__ = [
    "CorruptDocument", "DocumentNotFound", "DocumentUnreadable", "EmptyDocument", "MalformedReply",
    "MatchingError", "ResumeError", "ServiceNotConfigured", "ServiceTimeout",
    "ServiceUnavailable", "UnsupportedFormat",
    "DocumentFormat", "JobSummary", "Recommendation", "ResumeDocument",
    "RecommendationPipeline",
]
