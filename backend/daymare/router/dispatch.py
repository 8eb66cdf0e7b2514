"""
Daymare Backend: Router
========================

What:  Ordered table of (path matcher, handler) bindings with a default
       handler, and the dispatch loop that runs one request through it.
How:   Bindings are scanned in registration order and the FIRST one that
       matches wins. There is no longest-match or specificity ranking:
       specific patterns must be registered before catch-alls such as ``^/``.
       Matching looks at the URL path only; query string and host are ignored.
Who:   Built once by ``daymare.routes.blog.build_blog_router`` during
       startup; called for every request by the catch-all endpoint in
       ``daymare.main``.

Lifecycle:
    register() ... register() → freeze() → match()/dispatch() per request

    After ``freeze()`` the table is a tuple and ``register`` raises, so the
    set of routes cannot change while the server is handling requests.

Cost:
    Linear scan, O(number of routes) per request. Fine for a handful of
    static routes.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, FrozenSet, Iterable, List, Optional, Tuple, Union

from starlette.requests import Request
from starlette.responses import Response

from daymare.exceptions import DaymareError, InvalidRouteError
from daymare.middleware.request_id import request_id_var
from daymare.router.context import Context
from daymare.router.matchers import PathMatcher, RegexMatcher

logger = logging.getLogger(__name__)

Handler = Callable[[Context], Awaitable[None]]


@dataclass(frozen=True)
class Route:
    """One immutable binding. ``methods=None`` admits every method."""

    matcher: PathMatcher
    handler: Handler
    methods: Optional[FrozenSet[str]] = None

    def allows(self, method: str) -> bool:
        return self.methods is None or method.upper() in self.methods


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    params: List[str]


async def not_found_handler(ctx: Context) -> None:
    """Default handler: nothing in the table matched."""
    ctx.error(404, "Not found")


class Router:
    """
    First-match-wins dispatcher.

    Example:
        router = Router()
        router.register(r"^/api/article/([\\w._-]+)$", handlers.get_article, methods=["GET"])
        router.register(r"^/", static_handler)
        router.freeze()
    """

    def __init__(self, default_handler: Handler = not_found_handler):
        self._routes: Union[List[Route], Tuple[Route, ...]] = []
        self.default_handler = default_handler

    @property
    def routes(self) -> Tuple[Route, ...]:
        return tuple(self._routes)

    @property
    def frozen(self) -> bool:
        return isinstance(self._routes, tuple)

    def register(
        self,
        pattern: Union[str, PathMatcher],
        handler: Handler,
        methods: Optional[Iterable[str]] = None,
    ) -> Route:
        """
        Append a binding to the end of the table.

        Args:
            pattern:  A regular expression (compiled here) or any PathMatcher.
            handler:  Coroutine function taking a Context.
            methods:  HTTP methods the binding answers; None for all.

        Raises:
            InvalidRouteError: Malformed pattern, or the router is frozen.
        """
        if self.frozen:
            raise InvalidRouteError(
                message="Routes cannot be registered after the router is frozen",
                pattern=pattern if isinstance(pattern, str) else repr(pattern),
            )

        matcher = RegexMatcher(pattern) if isinstance(pattern, str) else pattern
        if not isinstance(matcher, PathMatcher):
            raise InvalidRouteError(message=f"{pattern!r} is not a path matcher")

        allowed = frozenset(m.upper() for m in methods) if methods is not None else None
        route = Route(matcher=matcher, handler=handler, methods=allowed)
        self._routes.append(route)
        logger.debug("Registered route %r → %s", matcher, getattr(handler, "__name__", handler))
        return route

    def freeze(self) -> None:
        """Fix the route table. Idempotent."""
        self._routes = tuple(self._routes)

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """The first binding admitting ``method`` whose matcher accepts ``path``."""
        for route in self._routes:
            if not route.allows(method):
                continue
            params = route.matcher.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    async def dispatch(self, request: Request) -> Response:
        """
        Run ``request`` through the table and return the handler's response.

        Application errors raised by the handler are rendered through their
        error kind. A handler that finishes without writing a response is a
        bug and answers 500.
        """
        found = self.match(request.method, request.url.path)
        if found is None:
            ctx = Context(request)
            handler = self.default_handler
        else:
            ctx = Context(request, found.params)
            handler = found.route.handler

        try:
            await handler(ctx)
        except DaymareError as exc:
            if ctx.responded:
                raise
            self._render_error(ctx, exc)

        if ctx.response is None:
            logger.error(
                "[%s] Handler %s wrote no response for %s %s",
                request_id_var.get(""),
                getattr(handler, "__name__", handler),
                request.method,
                request.url.path,
            )
            ctx.error(500, "internal server error")
        return ctx.response

    @staticmethod
    def _render_error(ctx: Context, exc: DaymareError) -> None:
        rid = request_id_var.get("")
        if exc.kind.redacted and exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        ctx.error(exc.status_code, exc.public_message)
