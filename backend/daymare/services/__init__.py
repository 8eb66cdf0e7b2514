# Services package init
"""
Daymare Backend: Services Package
==================================

What:  Persistence and file access, independent of HTTP.

Service Inventory:
    - article_store.py:  ArticleStore, the MongoDB adapter for articles
    - static_files.py:   StaticFileService, reads assets below STATIC_ROOT

Route handlers receive service instances at construction time and never
reach for module-level singletons, so tests can hand in doubles.
"""
