# Routes package init
"""
Family Docs Backend - API Routes Package
=========================================

Route Inventory:
    - documents.py: POST   /upload
                    GET    /documents
                    GET    /documents/{id}   (file bytes)
                    PUT    /documents/{id}
                    DELETE /documents/{id}
    - profile.py:   GET    /profile
                    POST   /profile
    - health.py:    GET    /                 (text banner)
                    GET    /health

Routes stay thin: pull data out of the request, call a service, shape the
response. Uploaded bytes are also served statically at /uploads/<name>
(mounted in main.py).
"""
