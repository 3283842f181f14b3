# ============================================================================
# API SCHEMAS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation
# CREATED: 18 OCT 2026
# ============================================================================
"""
API Schemas

Request and response models for the portal API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from core.models import CustomerRecord, ReadResult


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class CustomerCreate(BaseModel):
    """Request to register a customer."""
    name: str = Field(..., min_length=1, max_length=256)
    email: str = Field(default="", max_length=256)
    phone: str = Field(default="", max_length=64)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Ada Lovelace", "email": "ada@example.com", "phone": "555-0100"}
            ]
        }
    }


class MessageCreate(BaseModel):
    """Request to post an order queue message."""
    message: str = Field(..., max_length=64 * 1024)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class ActionResponse(BaseModel):
    """Result of a mutation, rendered as one status line."""
    success: bool
    message: str
    url: Optional[str] = None
    path: Optional[str] = None
    notified: Optional[bool] = None


class ErrorResponse(BaseModel):
    """Error response."""
    success: bool = False
    message: str


class CustomerResponse(BaseModel):
    """Customer profile."""
    row_key: str
    name: str
    email: str
    phone: str
    timestamp: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: CustomerRecord) -> "CustomerResponse":
        return cls(
            row_key=record.row_key,
            name=record.name,
            email=record.email,
            phone=record.phone,
            timestamp=record.timestamp,
        )


class CustomerListResponse(BaseModel):
    """List of customers. ``error`` is set when the listing failed."""
    customers: List[CustomerResponse]
    count: int
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: ReadResult) -> "CustomerListResponse":
        customers = [CustomerResponse.from_record(r) for r in result]
        return cls(customers=customers, count=len(customers), error=result.error)


class ItemListResponse(BaseModel):
    """List of image URLs, contract names or message payloads."""
    items: List[str]
    count: int
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: ReadResult) -> "ItemListResponse":
        return cls(items=list(result.items), count=len(result), error=result.error)


class QueueCountResponse(BaseModel):
    count: int


class ExistsResponse(BaseModel):
    name: str
    exists: bool


class DeleteResponse(BaseModel):
    success: bool
    message: str


class RemoteCheckResponse(BaseModel):
    """Result of a function app connection test."""
    configured: bool
    outcome: str
    status_code: Optional[int] = None
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
