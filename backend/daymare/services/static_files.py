"""
Daymare Backend: Static File Service
=====================================

What:  Resolves a request path to a file below the static root.
How:   Joins the path onto the resolved root, refuses anything that resolves
       outside it and serves ``index.html`` for directories. The file itself
       is streamed by ``FileResponse`` in the static handler, read from disk
       on every request. Nothing is cached.
Who:   Used by the catch-all static route handler.

Resolution outcomes:
    ✅ existing file below the root           → its path
    ✅ directory holding an index.html        → that index.html
    ❌ escapes the root (``..``, symlinks)    → None
    ❌ missing, or not a regular file         → None
    ❌ unrepresentable on this filesystem     → None
       (embedded NUL byte, name longer than NAME_MAX)
"""

import logging
from pathlib import Path
from typing import Optional

from daymare.config import settings

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


class StaticFileService:
    """Read-only view of one directory of static assets."""

    def __init__(self, static_root: Optional[str] = None):
        self.root = Path(static_root or settings.static_root).resolve()
        if not self.root.is_dir():
            logger.warning("Static root %s does not exist; every static request will 404", self.root)
        else:
            logger.info("StaticFileService serving %s", self.root)

    def resolve(self, request_path: str) -> Optional[Path]:
        """
        Map a URL path onto a file below the root.

        Returns None for paths escaping the root, for paths the filesystem
        cannot represent, and for anything that is not an existing regular
        file once directories are mapped to index.html.
        """
        relative = request_path.lstrip("/")
        try:
            candidate = (self.root / relative).resolve()

            if candidate != self.root and self.root not in candidate.parents:
                logger.warning("Refused static path outside root: %r", request_path)
                return None

            if candidate.is_dir():
                candidate = candidate / INDEX_FILE
            if not candidate.is_file():
                return None
        except (OSError, ValueError) as e:
            # ValueError: embedded NUL byte. OSError: ENAMETOOLONG and friends.
            logger.info("Unresolvable static path %r: %s", request_path, e)
            return None
        return candidate
