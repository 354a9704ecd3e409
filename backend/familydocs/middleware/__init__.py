# Middleware package init
"""
Family Docs Backend - Middleware Package
=========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: assign a correlation ID (or accept the client's X-Request-ID)
    2. Logging:    one access log line per request, tagged with that ID
    3. CORS:       FastAPI's CORSMiddleware (handles preflight)

    Responses unwind in reverse, so the logging middleware sees the final
    status code and the request ID middleware stamps X-Request-ID last.
"""
