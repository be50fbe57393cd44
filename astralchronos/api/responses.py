"""
Common API response models.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    code: Optional[str] = Field(None, description="Error code")


class FallbackErrorResponse(BaseModel):
    """Upstream failure carrying the payload the page shows instead."""
    error: str = Field(..., description="Error message")
    fallback: Dict[str, Any] = Field(..., description="Hardcoded replacement payload")


class ChatErrorResponse(BaseModel):
    """Chatbot failure with a reply the widget can still display."""
    error: str
    response: str
