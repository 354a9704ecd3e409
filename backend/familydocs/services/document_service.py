"""
Family Docs Backend - Document Service
=======================================

What:  Create/list/fetch/edit/delete for document records and their bytes.
How:   Composes FileService with the `documents` collection. Driver errors are
       wrapped in DatabaseError carrying the operation's message; missing
       records become NotFoundError.
Who:   Called by routes/documents.py; one instance per request (built by
       get_document_service from the app's database and settings).

Upload Flow (POST /upload):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐
    │  Route   │───▶│ FileService  │───▶│ insert_one   │
    │ (form)   │    │ store bytes  │    │ (documents)  │
    └──────────┘    └──────────────┘    └──────────────┘
                                              │ fails
                                              ▼
                                        cleanup bytes, raise DatabaseError

Delete Flow (DELETE /documents/{id}):
    find_one_and_delete → FileService.delete
    The record goes first. A file that is already missing only logs a
    warning; any other file error surfaces as FileStorageError after the
    record is gone.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from familydocs.database import DOCUMENTS_COLLECTION
from familydocs.exceptions import DatabaseError, FileStorageError, NotFoundError
from familydocs.models.document import DocumentRecord
from familydocs.schemas.document import DocumentUpdate
from familydocs.services.file_service import FileService

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def parse_object_id(document_id: str) -> ObjectId:
    """
    Converts a path id into an ObjectId.

    Raises:
        NotFoundError for anything that isn't a valid ObjectId; such an id
        can't match a record, so it is reported the same way as a miss.
    """
    try:
        return ObjectId(document_id)
    except (InvalidId, TypeError):
        raise NotFoundError(resource="Document", resource_id=document_id)


class DocumentService:
    """
    Business logic for document records.

    Responsibilities:
        - upload():   store bytes, then persist a new record
        - list_documents(): every record, in storage order
        - get():      one record by id
        - update():   change documentName/uploaderName only
        - delete():   remove the record, then its bytes
    """

    def __init__(self, database: Any, file_service: FileService):
        self.collection = database[DOCUMENTS_COLLECTION]
        self.files = file_service

    async def upload(
        self,
        filename: Optional[str],
        content: bytes,
        content_type: Optional[str],
        document_name: str,
        uploader_name: str,
    ) -> DocumentRecord:
        """
        Stores the file and creates its record.

        Returns:
            The persisted DocumentRecord (with its new id).

        Raises:
            ValidationError:  file too large (nothing stored)
            FileStorageError: bytes could not be written (nothing stored)
            DatabaseError:    insert failed (stored bytes are removed again)
        """
        _, stored_path = await self.files.store(filename, content)

        record = DocumentRecord(
            document_name=document_name,
            uploader_name=uploader_name,
            file_path=stored_path,
            file_type=content_type or DEFAULT_MIME_TYPE,
        )

        try:
            result = await self.collection.insert_one(record.to_mongo())
        except PyMongoError as e:
            logger.error("Error uploading document %s: %s", stored_path, str(e))
            await self.files.cleanup(stored_path)
            raise DatabaseError(
                message="Error uploading document",
                context={"file_path": stored_path, "detail": str(e)},
            )

        record.id = str(result.inserted_id)
        logger.info(
            "Document %s uploaded by %s: %s (%s)",
            record.id,
            uploader_name,
            stored_path,
            record.file_type,
        )
        return record

    async def list_documents(self) -> List[DocumentRecord]:
        """All records, no filtering, sorting, or pagination."""
        try:
            docs = await self.collection.find().to_list(length=None)
        except PyMongoError as e:
            logger.error("Error fetching documents: %s", str(e))
            raise DatabaseError(
                message="Error fetching documents",
                context={"detail": str(e)},
            )
        return [DocumentRecord.from_mongo(doc) for doc in docs]

    async def get(self, document_id: str) -> DocumentRecord:
        """
        One record by id.

        Raises:
            NotFoundError: no record has this id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        oid = parse_object_id(document_id)
        try:
            doc = await self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error("Error fetching document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Error fetching document file",
                context={"document_id": document_id, "detail": str(e)},
            )
        if doc is None:
            raise NotFoundError(resource="Document", resource_id=document_id)
        return DocumentRecord.from_mongo(doc)

    async def get_file(self, document_id: str) -> Tuple[Path, DocumentRecord]:
        """
        Resolves a record to the bytes it points at.

        Returns:
            Tuple of (absolute_path, record)

        Raises:
            NotFoundError, DatabaseError as get();
            FileStorageError if the record's bytes are missing on disk.
        """
        record = await self.get(document_id)
        path = self.files.open_path(record.file_path, message="Error fetching document file")
        return path, record

    async def update(self, document_id: str, changes: DocumentUpdate) -> DocumentRecord:
        """
        Atomically updates the name fields and returns the updated record.

        filePath, fileType and uploadDate are never part of the $set.
        """
        oid = parse_object_id(document_id)
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": changes.to_mongo_set()},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Error editing document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Error editing document",
                context={"document_id": document_id, "detail": str(e)},
            )
        if doc is None:
            raise NotFoundError(resource="Document", resource_id=document_id)

        logger.info("Document %s updated: %s", document_id, sorted(changes.to_mongo_set()))
        return DocumentRecord.from_mongo(doc)

    async def delete(self, document_id: str) -> DocumentRecord:
        """
        Deletes the record, then its bytes.

        Returns:
            The deleted record.

        Raises:
            NotFoundError:    no record has this id
            DatabaseError:    delete failed (nothing changed)
            FileStorageError: record deleted but its bytes could not be removed
        """
        oid = parse_object_id(document_id)
        try:
            doc = await self.collection.find_one_and_delete({"_id": oid})
        except PyMongoError as e:
            logger.error("Error deleting document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Error deleting document",
                context={"document_id": document_id, "detail": str(e)},
            )
        if doc is None:
            raise NotFoundError(resource="Document", resource_id=document_id)

        record = DocumentRecord.from_mongo(doc)
        try:
            await self.files.delete(record.file_path)
        except FileStorageError as e:
            raise FileStorageError(
                message="Error deleting document",
                context={**e.context, "document_id": document_id},
            ) from e

        logger.info("Document %s deleted (%s)", document_id, record.file_path)
        return record
