# Middleware package init
"""
Daymare Backend: Middleware Package
====================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Endpoint

    Response ← [Request ID] ← [Logging] ← [GZip] ← [CORS] ← Endpoint

- The request id is set before the logging middleware reads it, and written
  to the response headers on the way out.
- The access line carries the final status and the full duration.
"""
