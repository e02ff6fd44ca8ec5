"""
Pydantic schemas for API request/response models.
"""

from pydantic import BaseModel, ConfigDict, Field

from sentiment_service.analysis import Analysis, SentenceAnalysis


class AnalyzeRequest(BaseModel):
    """Request model for text analysis."""

    model_config = ConfigDict(extra="ignore")

    text: str = Field(..., description="Text to analyze")


class ErrorResponse(BaseModel):
    """Response model for errors."""

    kind: str = Field(..., description="Error kind: validation, analysis, dispatch, not_found or internal")
    message: str = Field(..., description="Error message")


__all__ = ["AnalyzeRequest", "ErrorResponse", "Analysis", "SentenceAnalysis"]
