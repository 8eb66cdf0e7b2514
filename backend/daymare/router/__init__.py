"""
Daymare Backend: Router Package
================================

The hand-rolled request router: path matchers, the per-request Context and
the first-match-wins dispatch table.
"""

from daymare.router.context import Context
from daymare.router.dispatch import Handler, Route, RouteMatch, Router, not_found_handler
from daymare.router.matchers import ExactMatcher, PathMatcher, PrefixMatcher, RegexMatcher

__all__ = [
    "Context",
    "ExactMatcher",
    "Handler",
    "PathMatcher",
    "PrefixMatcher",
    "RegexMatcher",
    "Route",
    "RouteMatch",
    "Router",
    "not_found_handler",
]
