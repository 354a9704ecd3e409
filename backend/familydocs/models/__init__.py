"""Persistence records for the `documents` and `profiles` collections."""

from familydocs.models.document import DocumentRecord
from familydocs.models.profile import PROFILE_ID, ProfileRecord

__all__ = [
    "DocumentRecord",
    "ProfileRecord",
    "PROFILE_ID",
]
