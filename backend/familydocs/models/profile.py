"""
Family Docs Backend - Profile Record
=====================================

What:  The single household identity stored in the `profiles` collection.
How:   One record under the fixed _id PROFILE_ID. ProfileService upserts that
       key, so two concurrent first writes still converge on one record.

Field rules:
    - family_name:     Free text, overwritten by every POST /profile
    - profile_picture: Stored file name (served at /uploads/<name>) or None;
                       overwritten only when a new picture is uploaded
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

PROFILE_ID = "household"


class ProfileRecord(BaseModel):
    """The household profile as stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    family_name: Optional[str] = None
    profile_picture: Optional[str] = None

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "ProfileRecord":
        data = {k: v for k, v in doc.items() if k not in ("_id", "__v")}
        return cls.model_validate(data)
