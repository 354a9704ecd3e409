"""
Family Docs Backend - Document Record
======================================

What:  Typed representation of one record in the `documents` collection.
How:   Stored field names are camelCase (documentName, uploadDate, ...) so the
       collection stays readable by existing tooling that wrote the same shape.
       Python code works with snake_case attributes; to_mongo()/from_mongo()
       translate at the collection boundary.
Who:   Built by DocumentService on upload; read back on every query.

Field rules:
    - id:            Mongo ObjectId (hex string in Python), assigned by the database
    - document_name: Free-text label, mutable via PUT /documents/{id}
    - uploader_name: Free-text attribution, mutable via PUT /documents/{id}
    - file_path:     "uploads/<stored-name>", immutable for the life of the record
    - file_type:     MIME type captured at upload, immutable
    - upload_date:   UTC creation time, immutable
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DocumentRecord(BaseModel):
    """One uploaded family file and its metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    document_name: Optional[str] = None
    uploader_name: Optional[str] = None
    file_path: str
    file_type: str
    upload_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "DocumentRecord":
        """Builds a record from a raw collection document (``_id`` → ``id``)."""
        data = {k: v for k, v in doc.items() if k not in ("_id", "__v")}
        return cls.model_validate({**data, "id": str(doc["_id"])})

    def to_mongo(self) -> Dict[str, Any]:
        """Stored shape, without ``_id`` (the database assigns it on insert)."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def __repr__(self) -> str:
        return f"<DocumentRecord(id={self.id}, file_path='{self.file_path}')>"
