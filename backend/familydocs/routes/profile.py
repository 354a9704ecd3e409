"""
Family Docs Backend - Profile Route Handlers
=============================================

What:  GET /profile and POST /profile for the household identity.
How:   POST takes multipart form data: a required familyName and an optional
       profilePicture file. Sending no picture keeps the current one.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from familydocs.dependencies import RequiredFormFields, get_profile_service
from familydocs.schemas.document import ErrorResponse
from familydocs.schemas.profile import ProfileResponse, ProfileUpdateResponse
from familydocs.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Profile"])


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get the household profile",
)
async def get_profile(
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """The profile, or empty strings for both fields if none was saved yet."""
    record = await service.get()
    if record is None:
        return ProfileResponse.empty()
    return ProfileResponse.from_record(record)


@router.post(
    "/profile",
    response_model=ProfileUpdateResponse,
    responses={500: {"description": "Storage or database failure", "model": ErrorResponse}},
    summary="Create or update the household profile",
    dependencies=[Depends(RequiredFormFields("familyName"))],
)
async def update_profile(
    family_name: str = Form("", alias="familyName"),
    profile_picture: Optional[UploadFile] = File(default=None, alias="profilePicture"),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    picture_filename: Optional[str] = None
    picture_content: Optional[bytes] = None

    # Browsers send an empty, unnamed part when no picture was chosen
    if profile_picture is not None and profile_picture.filename:
        try:
            picture_filename = profile_picture.filename
            picture_content = await profile_picture.read()
        finally:
            await profile_picture.close()
    elif profile_picture is not None:
        await profile_picture.close()

    record = await service.update(
        family_name=family_name,
        picture_filename=picture_filename,
        picture_content=picture_content,
    )
    return ProfileUpdateResponse(
        message="Profile updated successfully!",
        profile=ProfileResponse.from_record(record),
    )
