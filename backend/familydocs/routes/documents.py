"""
Family Docs Backend - Document Route Handlers
==============================================

What:  POST /upload, GET /documents, and GET/PUT/DELETE /documents/{id}.
How:   Extracts form fields, JSON bodies and path ids, delegates to
       DocumentService, and returns JSON (or the file itself for GET by id).
Who:   Called by the family frontend's upload form and document list.

Error responses are produced by the global handlers in main.py:
    NotFoundError    → 404 {"message": "Document not found", ...}
    DatabaseError    → 500 {"message": "Error ... document", "error": ...}
    FileStorageError → 500
    missing fields   → 422 (FastAPI request validation; empty strings are accepted)
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse

from familydocs.dependencies import RequiredFormFields, get_document_service
from familydocs.schemas.document import (
    DocumentResponse,
    DocumentUpdate,
    DocumentUpdateResponse,
    ErrorResponse,
    MessageResponse,
)
from familydocs.services.document_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documents"])


@router.post(
    "/upload",
    response_model=MessageResponse,
    responses={
        400: {"description": "File too large", "model": ErrorResponse},
        500: {"description": "Storage or database failure", "model": ErrorResponse},
    },
    summary="Upload a family document",
    dependencies=[Depends(RequiredFormFields("documentName", "uploaderName"))],
)
async def upload_document(
    file: UploadFile = File(..., description="The document file (any type)"),
    document_name: str = Form("", alias="documentName"),
    uploader_name: str = Form("", alias="uploaderName"),
    service: DocumentService = Depends(get_document_service),
) -> MessageResponse:
    """
    Store an uploaded file and create its document record.

    The MIME type recorded is the one the client sent with the file part.
    """
    try:
        content = await file.read()
        logger.info(
            "Received upload: filename=%s, size=%d bytes, type=%s",
            file.filename or "unknown",
            len(content),
            file.content_type,
        )
        await service.upload(
            filename=file.filename,
            content=content,
            content_type=file.content_type,
            document_name=document_name,
            uploader_name=uploader_name,
        )
    finally:
        await file.close()

    return MessageResponse(message="Document uploaded successfully!")


@router.get(
    "/documents",
    response_model=list[DocumentResponse],
    responses={500: {"description": "Database failure", "model": ErrorResponse}},
    summary="List all documents",
)
async def list_documents(
    service: DocumentService = Depends(get_document_service),
) -> list[DocumentResponse]:
    """Every document record, in storage order. No filtering or pagination."""
    records = await service.list_documents()
    return [DocumentResponse.from_record(record) for record in records]


@router.get(
    "/documents/{document_id}",
    response_class=FileResponse,
    responses={
        200: {"description": "The stored file bytes"},
        404: {"description": "Document not found", "model": ErrorResponse},
        500: {"description": "File missing on disk or database failure", "model": ErrorResponse},
    },
    summary="Download a document's file",
)
async def get_document_file(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> FileResponse:
    """
    Stream the file behind a document record.

    Content-Type is the MIME type captured at upload time.
    """
    path, record = await service.get_file(document_id)
    return FileResponse(path=str(path), media_type=record.file_type)


@router.put(
    "/documents/{document_id}",
    response_model=DocumentUpdateResponse,
    responses={
        404: {"description": "Document not found", "model": ErrorResponse},
        500: {"description": "Database failure", "model": ErrorResponse},
    },
    summary="Edit a document's name fields",
)
async def update_document(
    document_id: str,
    changes: DocumentUpdate,
    service: DocumentService = Depends(get_document_service),
) -> DocumentUpdateResponse:
    """Change documentName and/or uploaderName; the file itself is untouched."""
    record = await service.update(document_id, changes)
    return DocumentUpdateResponse(
        message="Document updated successfully",
        document=DocumentResponse.from_record(record),
    )


@router.delete(
    "/documents/{document_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Document not found", "model": ErrorResponse},
        500: {"description": "Database or file deletion failure", "model": ErrorResponse},
    },
    summary="Delete a document and its file",
)
async def delete_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> MessageResponse:
    await service.delete(document_id)
    return MessageResponse(message="Document deleted successfully")
