"""
Family Docs Backend - Profile Service
======================================

What:  Reads and upserts the single household profile.
How:   The profile lives under the fixed _id PROFILE_ID in `profiles`.
       update() is one find_one_and_update(upsert=True): familyName is always
       set, profilePicture is set only when a new picture was stored, and a
       record created without a picture gets profilePicture=None. A picture
       that gets replaced is deleted from the upload directory afterwards.
Who:   Called by routes/profile.py.
"""

import logging
from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from familydocs.database import PROFILES_COLLECTION
from familydocs.exceptions import DatabaseError
from familydocs.models.profile import PROFILE_ID, ProfileRecord
from familydocs.services.file_service import FileService

logger = logging.getLogger(__name__)


class ProfileService:
    """Business logic for the household profile."""

    def __init__(self, database: Any, file_service: FileService):
        self.collection = database[PROFILES_COLLECTION]
        self.files = file_service

    async def get(self) -> Optional[ProfileRecord]:
        """The profile, or None if it was never saved."""
        try:
            doc = await self.collection.find_one({"_id": PROFILE_ID})
        except PyMongoError as e:
            logger.error("Error fetching profile: %s", str(e))
            raise DatabaseError(message="Error fetching profile", context={"detail": str(e)})
        return ProfileRecord.from_mongo(doc) if doc is not None else None

    async def update(
        self,
        family_name: str,
        picture_filename: Optional[str] = None,
        picture_content: Optional[bytes] = None,
    ) -> ProfileRecord:
        """
        Creates or updates the profile.

        Args:
            family_name:      New household name (always written)
            picture_filename: Client filename of the new picture, if any
            picture_content:  Bytes of the new picture; None keeps the current one

        Raises:
            ValidationError / FileStorageError from storing the picture
            DatabaseError if the upsert fails (the new picture is removed again)
        """
        stored_path: Optional[str] = None
        changes: Dict[str, Any] = {"familyName": family_name}
        update: Dict[str, Any] = {"$set": changes}

        if picture_content is not None:
            stored_name, stored_path = await self.files.store(picture_filename, picture_content)
            changes["profilePicture"] = stored_name
        else:
            update["$setOnInsert"] = {"profilePicture": None}

        try:
            # BEFORE: the replaced picture name is needed for cleanup
            before = await self.collection.find_one_and_update(
                {"_id": PROFILE_ID},
                update,
                upsert=True,
                return_document=ReturnDocument.BEFORE,
            )
        except PyMongoError as e:
            logger.error("Error updating profile: %s", str(e))
            if stored_path:
                await self.files.cleanup(stored_path)
            raise DatabaseError(message="Error updating profile", context={"detail": str(e)})

        previous = before or {}
        old_picture = previous.get("profilePicture")
        if stored_path and old_picture and old_picture != changes["profilePicture"]:
            await self.files.cleanup(FileService.stored_path_for(old_picture))

        logger.info(
            "Profile updated: familyName=%s, new picture=%s",
            family_name,
            changes.get("profilePicture", "no"),
        )
        return ProfileRecord.from_mongo({"profilePicture": None, **previous, **changes})
