"""
Team Chat API - Common Schemas
Base models and enums shared across the application
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel
from enum import Enum


# ==================== Enums ====================

class MemberRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


# ==================== Response Models ====================

class IdResponse(BaseModel):
    """Id of the created or affected record."""
    id: str


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = False
    error: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
