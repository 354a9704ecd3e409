# Services package init
"""
Family Docs Backend - Services Layer
=====================================

What:  Business logic between routes (HTTP) and MongoDB / the upload directory.
How:   Services receive their collaborators (database handle, FileService)
       in the constructor; dependencies.py builds them per request.

Service Inventory:
    - FileService:     upload directory writes, path resolution, deletes
    - DocumentService: document record CRUD plus the bytes behind each record
    - ProfileService:  the household profile upsert
"""
