"""
Family Docs Backend - Profile Request/Response Schemas
=======================================================

The profile form (familyName + optional profilePicture file) arrives as
multipart data, so its input is declared with Form/File parameters in
routes/profile.py rather than as a body model here.
"""

from typing import Optional

from pydantic import BaseModel, Field

from familydocs.models.profile import ProfileRecord
from familydocs.schemas.document import CamelModel


class ProfileResponse(CamelModel):
    """
    What:  The household profile.
    Who:   GET /profile, and the `profile` of POST /profile.

    Before the first POST /profile both fields are empty strings.
    """

    family_name: Optional[str] = Field(default="", description="Household name")
    profile_picture: Optional[str] = Field(
        default="",
        description="Stored picture file name (served at /uploads/<name>), null if never set",
    )

    @classmethod
    def from_record(cls, record: ProfileRecord) -> "ProfileResponse":
        return cls.model_validate(record.model_dump())

    @classmethod
    def empty(cls) -> "ProfileResponse":
        return cls(family_name="", profile_picture="")


class ProfileUpdateResponse(BaseModel):
    """Returned by POST /profile."""

    message: str = Field(default="Profile updated successfully!")
    profile: ProfileResponse
