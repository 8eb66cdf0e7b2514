"""
Daymare Backend: Application Package
=====================================

What: A small blog backend. Articles live in MongoDB and are served as JSON,
      next to a directory of static assets.
Who:  Imported by uvicorn (``daymare.main:app``), the console script and pytest.

Layout:

    ┌─────────────────────────────────────┐
    │   FastAPI shell (main, middleware)  │  ← lifespan, logging, health
    ├─────────────────────────────────────┤
    │   Router (regex bindings, Context)  │  ← first match wins
    ├─────────────────────────────────────┤
    │   Route handlers (articles, static) │  ← request/response mapping
    ├─────────────────────────────────────┤
    │   ArticleStore (Motor collection)   │  ← MongoDB persistence
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
__app_name__ = "Daymare"
