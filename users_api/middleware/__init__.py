# Middleware package init
"""
Users API: Middleware Package
===============================

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → Route Handler

    The request id is assigned before the access log reads it, and the
    X-Request-ID response header is added on the way out.
"""
