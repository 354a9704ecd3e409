"""
Family Docs Backend - Application Package
==========================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← CRUD, upload/delete of bytes
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← stored records + API contracts
    ├─────────────────────────────────────┤
    │  Database (MongoDB) │ Upload dir    │  ← persistence
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
