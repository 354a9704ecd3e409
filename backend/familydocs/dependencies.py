"""
Family Docs Backend - Request Dependencies
===========================================

What:  FastAPI dependency providers that hand services to route handlers.
How:   Everything is read from app.state, which create_app() fills in:
       the database handle (opened by the lifespan, or injected by tests)
       and the FileService bound to the configured upload directory.

Example usage in a route:
    @router.get("/documents")
    async def list_documents(service: DocumentService = Depends(get_document_service)):
        ...
"""

from typing import Any

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError

from familydocs.database import get_database
from familydocs.services.document_service import DocumentService
from familydocs.services.file_service import FileService
from familydocs.services.profile_service import ProfileService


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_document_service(
    database: Any = Depends(get_database),
    file_service: FileService = Depends(get_file_service),
) -> DocumentService:
    return DocumentService(database, file_service)


def get_profile_service(
    database: Any = Depends(get_database),
    file_service: FileService = Depends(get_file_service),
) -> ProfileService:
    return ProfileService(database, file_service)


class RequiredFormFields:
    """
    Rejects a form that lacks any of the named text fields.

    FastAPI reports an empty string in a required Form() field as missing,
    so the routes declare their text fields with a "" default and attach this
    check instead: an absent field is a 422, an empty one is a valid value.

    Example usage:
        @router.post("/upload", dependencies=[Depends(RequiredFormFields("documentName"))])
    """

    def __init__(self, *names: str):
        self.names = names

    async def __call__(self, request: Request) -> None:
        # Already parsed and cached by FastAPI when it read the request body
        form = await request.form()
        missing = [name for name in self.names if name not in form]
        if missing:
            raise RequestValidationError(
                [
                    {"type": "missing", "loc": ("body", name), "msg": "Field required", "input": None}
                    for name in missing
                ]
            )
