"""
Family Docs Backend - Profile Service Unit Tests
=================================================

What:  Tests for the household profile read and upsert.
"""

import pytest
from unittest.mock import AsyncMock

from pymongo.errors import PyMongoError

from familydocs.database import PROFILES_COLLECTION
from familydocs.exceptions import DatabaseError
from familydocs.models.profile import PROFILE_ID
from familydocs.services.profile_service import ProfileService


@pytest.fixture
def service(database, file_service):
    return ProfileService(database, file_service)


class TestProfileService:

    @pytest.mark.asyncio
    async def test_get_before_first_save_returns_none(self, service):
        assert await service.get() is None

    @pytest.mark.asyncio
    async def test_first_update_without_picture_creates_profile(self, service, database):
        record = await service.update(family_name="Smith")

        assert record.family_name == "Smith"
        assert record.profile_picture is None
        assert [d["_id"] for d in database[PROFILES_COLLECTION].docs] == [PROFILE_ID]

    @pytest.mark.asyncio
    async def test_update_with_picture_stores_file_name(self, service, upload_dir):
        record = await service.update(
            family_name="Smith",
            picture_filename="family.png",
            picture_content=b"\x89PNG",
        )

        assert record.profile_picture.endswith("-family.png")
        assert (upload_dir / record.profile_picture).read_bytes() == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_second_update_without_picture_keeps_picture(self, service, database):
        first = await service.update(
            family_name="Smith",
            picture_filename="family.png",
            picture_content=b"\x89PNG",
        )

        second = await service.update(family_name="Smith-Jones")

        assert second.family_name == "Smith-Jones"
        assert second.profile_picture == first.profile_picture
        assert len(database[PROFILES_COLLECTION].docs) == 1

    @pytest.mark.asyncio
    async def test_failed_upsert_removes_new_picture(self, service, database, upload_dir):
        database[PROFILES_COLLECTION].find_one_and_update = AsyncMock(
            side_effect=PyMongoError("connection refused")
        )

        with pytest.raises(DatabaseError, match="Error updating profile"):
            await service.update(
                family_name="Smith",
                picture_filename="family.png",
                picture_content=b"\x89PNG",
            )

        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_new_picture_deletes_replaced_one(self, service, upload_dir):
        first = await service.update(
            family_name="Smith", picture_filename="old.png", picture_content=b"old"
        )

        second = await service.update(
            family_name="Smith", picture_filename="new.png", picture_content=b"new"
        )

        assert second.profile_picture != first.profile_picture
        assert not (upload_dir / first.profile_picture).exists()
        assert (upload_dir / second.profile_picture).read_bytes() == b"new"

    @pytest.mark.asyncio
    async def test_empty_family_name_is_stored(self, service):
        await service.update(family_name="Smith")

        record = await service.update(family_name="")

        assert record.family_name == ""
        assert (await service.get()).family_name == ""
