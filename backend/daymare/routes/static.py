"""
Daymare Backend: Static Fallback Handler
=========================================

What:  Serves files from the static root for any path no API route claimed.
How:   ``FileResponse`` streams the file and supplies the content type,
       Content-Length, ETag and Last-Modified headers. HEAD requests get the
       headers without a body.
Who:   Bound last in the route table, behind the catch-all ``^/`` pattern.
"""

from fastapi.responses import FileResponse
from starlette.responses import PlainTextResponse

from daymare.router.context import Context
from daymare.services.static_files import StaticFileService


class StaticHandler:
    """Catch-all handler backed by one StaticFileService."""

    def __init__(self, files: StaticFileService):
        self.files = files

    async def __call__(self, ctx: Context) -> None:
        path = self.files.resolve(ctx.path)
        if path is None:
            ctx.send(PlainTextResponse("404 page not found", status_code=404))
            return
        ctx.send(FileResponse(path=str(path)))
