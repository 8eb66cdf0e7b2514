# Routes package init
"""
Daymare Backend: Route Handlers Package
========================================

Route Inventory:
    - articles.py:  /api/index, /api/save, /api/article/{id}
    - static.py:    catch-all static file handler
    - blog.py:      the ordered route table tying the two together
    - health.py:    GET /health (a plain FastAPI route, outside the table)

Handlers stay thin: decode the request, call the store, write one response.
"""
