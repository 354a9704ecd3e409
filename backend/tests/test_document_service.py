"""
Family Docs Backend - Document Service Unit Tests
==================================================

What:  Tests for DocumentService upload/list/get/update/delete.
How:   In-memory database double plus a real FileService over tmp_path;
       driver failures are injected with AsyncMock(side_effect=PyMongoError).

What we test:
    ✅ Upload stores bytes and persists one record
    ✅ Failed insert leaves no orphaned file
    ✅ Unknown and malformed ids raise NotFoundError
    ✅ Update touches only the name fields
    ✅ Delete removes record and bytes; tolerates already-missing bytes
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from bson import ObjectId
from pymongo.errors import PyMongoError

from familydocs.database import DOCUMENTS_COLLECTION
from familydocs.exceptions import DatabaseError, FileStorageError, NotFoundError
from familydocs.schemas.document import DocumentUpdate
from familydocs.services.document_service import DocumentService


@pytest.fixture
def service(database, file_service):
    return DocumentService(database, file_service)


async def _upload(service, name="Passport", uploader="Alice", content=b"abc"):
    return await service.upload(
        filename="passport.pdf",
        content=content,
        content_type="application/pdf",
        document_name=name,
        uploader_name=uploader,
    )


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_persists_record_and_bytes(self, service, database, upload_dir):
        record = await _upload(service)

        stored = database[DOCUMENTS_COLLECTION].docs
        assert len(stored) == 1
        assert str(stored[0]["_id"]) == record.id
        assert stored[0]["documentName"] == "Passport"
        assert stored[0]["uploaderName"] == "Alice"
        assert stored[0]["fileType"] == "application/pdf"
        assert stored[0]["filePath"] == record.file_path
        assert record.file_path.startswith("uploads/")
        assert service.files.resolve(record.file_path).read_bytes() == b"abc"

    @pytest.mark.asyncio
    async def test_upload_without_content_type_uses_octet_stream(self, service):
        record = await service.upload(
            filename="notes",
            content=b"abc",
            content_type=None,
            document_name="Notes",
            uploader_name="Bob",
        )
        assert record.file_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_failed_insert_removes_stored_bytes(self, service, database, upload_dir):
        database[DOCUMENTS_COLLECTION].insert_one = AsyncMock(
            side_effect=PyMongoError("connection refused")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await _upload(service)

        assert exc_info.value.message == "Error uploading document"
        assert exc_info.value.detail == "connection refused"
        assert list(upload_dir.iterdir()) == []


class TestListAndGet:

    @pytest.mark.asyncio
    async def test_list_returns_every_record_in_storage_order(self, service):
        first = await _upload(service, name="Passport")
        second = await _upload(service, name="Birth certificate")

        records = await service.list_documents()

        assert [r.id for r in records] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_list_database_failure(self, service, database):
        database[DOCUMENTS_COLLECTION].find = MagicMock(side_effect=PyMongoError("timeout"))

        with pytest.raises(DatabaseError, match="Error fetching documents"):
            await service.list_documents()

    @pytest.mark.asyncio
    async def test_get_unknown_id_raises_not_found(self, service):
        with pytest.raises(NotFoundError, match="Document not found"):
            await service.get(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_get_malformed_id_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get("not-an-object-id")

    @pytest.mark.asyncio
    async def test_get_file_missing_on_disk(self, service):
        record = await _upload(service)
        service.files.resolve(record.file_path).unlink()

        with pytest.raises(FileStorageError, match="Error fetching document file"):
            await service.get_file(record.id)


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_changes_only_name_fields(self, service):
        original = await _upload(service)

        updated = await service.update(
            original.id, DocumentUpdate(documentName="Passport (renewed)")
        )

        assert updated.document_name == "Passport (renewed)"
        assert updated.uploader_name == "Alice"
        assert updated.file_path == original.file_path
        assert updated.file_type == original.file_type
        assert updated.upload_date == original.upload_date

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.update(str(ObjectId()), DocumentUpdate(uploaderName="Bob"))

    @pytest.mark.asyncio
    async def test_update_database_failure(self, service, database):
        record = await _upload(service)
        database[DOCUMENTS_COLLECTION].find_one_and_update = AsyncMock(
            side_effect=PyMongoError("not primary")
        )

        with pytest.raises(DatabaseError, match="Error editing document"):
            await service.update(record.id, DocumentUpdate(uploaderName="Bob"))


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_record_and_bytes(self, service, database, upload_dir):
        record = await _upload(service)

        await service.delete(record.id)

        assert database[DOCUMENTS_COLLECTION].docs == []
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_delete_tolerates_missing_bytes(self, service, database):
        record = await _upload(service)
        service.files.resolve(record.file_path).unlink()

        deleted = await service.delete(record.id)

        assert deleted.id == record.id
        assert database[DOCUMENTS_COLLECTION].docs == []

    @pytest.mark.asyncio
    async def test_delete_file_error_after_record_removed(self, service, database):
        record = await _upload(service)

        with patch(
            "familydocs.services.file_service.os.remove",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(FileStorageError, match="Error deleting document"):
                await service.delete(record.id)

        assert database[DOCUMENTS_COLLECTION].docs == []

    @pytest.mark.asyncio
    async def test_delete_unknown_id_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.delete(str(ObjectId()))
