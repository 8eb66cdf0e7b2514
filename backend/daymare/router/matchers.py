"""
Daymare Backend: Path Matchers
===============================

What:  Interchangeable strategies that decide whether a request path matches
       a route and which parameters it captures.
How:   Anything with a ``match(path) -> Optional[List[str]]`` method satisfies
       ``PathMatcher``. ``None`` means no match; a list (possibly empty) means
       a match with its captured parameters, in group order.
"""

import re
from typing import List, Optional, Protocol, runtime_checkable

from daymare.exceptions import InvalidRouteError


@runtime_checkable
class PathMatcher(Protocol):
    """Capability the router needs from a route pattern."""

    def match(self, path: str) -> Optional[List[str]]:
        ...


class RegexMatcher:
    """
    Regular-expression matcher with search semantics.

    The pattern is compiled once, at construction. It is not implicitly
    anchored: ``^/`` matches every absolute path, so patterns meant to match
    a whole path spell out both ``^`` and ``$``.

    Captured groups become the parameter list. A group that did not take
    part in the match yields ``""``.
    """

    __slots__ = ("pattern", "_compiled")

    def __init__(self, pattern: str):
        try:
            self._compiled = re.compile(pattern)
        except re.error as e:
            raise InvalidRouteError(
                message=f"Malformed route pattern {pattern!r}: {e}",
                pattern=pattern,
            ) from e
        self.pattern = pattern

    def match(self, path: str) -> Optional[List[str]]:
        found = self._compiled.search(path)
        if found is None:
            return None
        return [group or "" for group in found.groups()]

    def __repr__(self) -> str:
        return f"RegexMatcher({self.pattern!r})"


class ExactMatcher:
    """Matches one literal path. Never captures."""

    __slots__ = ("path",)

    def __init__(self, path: str):
        self.path = path

    def match(self, path: str) -> Optional[List[str]]:
        return [] if path == self.path else None

    def __repr__(self) -> str:
        return f"ExactMatcher({self.path!r})"


class PrefixMatcher:
    """Matches every path starting with ``prefix``. Never captures."""

    __slots__ = ("prefix",)

    def __init__(self, prefix: str):
        self.prefix = prefix

    def match(self, path: str) -> Optional[List[str]]:
        return [] if path.startswith(self.prefix) else None

    def __repr__(self) -> str:
        return f"PrefixMatcher({self.prefix!r})"
