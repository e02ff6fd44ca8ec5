"""
API package for the sentiment analysis service.
"""

from .cache import AnalysisCache
from .schemas import AnalyzeRequest, ErrorResponse

__all__ = [
    "AnalysisCache",
    "AnalyzeRequest",
    "ErrorResponse",
]
