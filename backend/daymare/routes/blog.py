"""
Daymare Backend: Blog Route Table
==================================

What:  Wires the article handlers and the static fallback into a Router.
When:  Once, during application startup. The returned router is frozen.

Registration order is the only tie-break. The catch-all ``^/`` must stay last,
otherwise it shadows every API route:

    1. ^/api/save$                      POST
    2. ^/api/article/([\\w._-]+)$         GET, PUT, DELETE
    3. ^/api/index$                     GET
    4. ^/                               GET, HEAD  (static files)

Bindings are method-aware: a request whose method a binding does not list
skips it and falls through to later bindings, so ``GET /api/save`` ends at the
static fallback and ``POST /api/index`` at the default handler. Anything left
over (e.g. ``POST /elsewhere``) reaches the default handler, which answers
404 ``{"error": "Not found"}``.
"""

from typing import Optional

from daymare.router.dispatch import Router
from daymare.routes.articles import ArticleHandlers
from daymare.routes.static import StaticHandler
from daymare.services.article_store import ArticleStore
from daymare.services.static_files import StaticFileService

SAVE_PATTERN = r"^/api/save$"
ARTICLE_PATTERN = r"^/api/article/([\w._-]+)$"
INDEX_PATTERN = r"^/api/index$"
STATIC_PATTERN = r"^/"


def build_blog_router(store: ArticleStore, static_root: Optional[str] = None) -> Router:
    """Build and freeze the route table around ``store``."""
    articles = ArticleHandlers(store)
    static = StaticHandler(StaticFileService(static_root))

    router = Router()
    router.register(SAVE_PATTERN, articles.save, methods=["POST"])
    router.register(ARTICLE_PATTERN, articles.get_article, methods=["GET"])
    router.register(ARTICLE_PATTERN, articles.update_article, methods=["PUT"])
    router.register(ARTICLE_PATTERN, articles.delete_article, methods=["DELETE"])
    router.register(INDEX_PATTERN, articles.index, methods=["GET"])
    router.register(STATIC_PATTERN, static, methods=["GET", "HEAD"])
    router.freeze()
    return router
