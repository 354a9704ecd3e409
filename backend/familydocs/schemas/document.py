"""
Family Docs Backend - Document Request/Response Schemas
========================================================

What:  Pydantic models defining the API contract for the document routes.
How:   FastAPI validates request bodies against these models, serializes
       responses through them, and builds the OpenAPI docs from them.
       JSON keys are camelCase (documentName, uploadDate) to match the stored
       shape and the existing frontend; Python attributes stay snake_case.

Design Decision:
    Schemas are separate from the persistence records in familydocs.models:
    the API exposes `id` where the collection stores `_id`, and request
    bodies only carry the fields a client may change.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from familydocs.models.document import DocumentRecord


class CamelModel(BaseModel):
    """Base for API models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class DocumentResponse(CamelModel):
    """
    What:  Full representation of one document record.
    Who:   Items of GET /documents; the `document` of PUT /documents/{id}.
    """

    id: str = Field(description="Document identifier (24-char hex ObjectId)")
    document_name: Optional[str] = Field(default=None, description="Label shown to the family")
    uploader_name: Optional[str] = Field(default=None, description="Who uploaded the file")
    file_path: str = Field(description="Storage path, also the static URL path (uploads/<name>)")
    file_type: str = Field(description="MIME type captured at upload")
    upload_date: datetime = Field(description="When the document was uploaded (UTC ISO 8601)")

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentResponse":
        return cls.model_validate(record.model_dump())


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by upload and delete."""

    message: str = Field(description="Human-readable result message")


class DocumentUpdateResponse(BaseModel):
    """Returned by PUT /documents/{id}."""

    message: str = Field(default="Document updated successfully")
    document: DocumentResponse


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class DocumentUpdate(CamelModel):
    """
    What:  Body of PUT /documents/{id}.
    How:   Only the two name fields are accepted; anything else (filePath,
           fileType, uploadDate) is rejected with 422. At least one of the two
           must be given, and null is treated as "not given".
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    document_name: Optional[str] = Field(default=None, description="New label")
    uploader_name: Optional[str] = Field(default=None, description="New uploader attribution")

    @model_validator(mode="after")
    def require_one_field(self) -> "DocumentUpdate":
        if self.document_name is None and self.uploader_name is None:
            raise ValueError("Provide documentName and/or uploaderName")
        return self

    def to_mongo_set(self) -> Dict[str, Any]:
        """The $set payload: stored (camelCase) names of the supplied fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error envelope for all API errors.

    Example:
        {
            "message": "Error uploading document",
            "error": "connection refused",
            "request_id": "1f0c9a2b"
        }
    """

    message: str = Field(description="Human-readable error description")
    error: Optional[str] = Field(default=None, description="Error code or underlying failure detail")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
