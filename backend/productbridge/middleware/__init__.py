"""
ProductBridge Backend — Middleware Package
============================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: assigns/propagates X-Request-ID for log correlation
    2. Logging: one access line per request with status and duration
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
