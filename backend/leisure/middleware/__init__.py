# Middleware package init
"""
Leisure Catalog API — Middleware Package
=========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    1. Request ID: Correlation id for the error logs of this request
    2. Access Log: One combined-format line with the final status code
    3. CORS: FastAPI's CORSMiddleware, every origin allowed
"""
