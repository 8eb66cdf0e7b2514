"""
Daymare Backend: Request Context
=================================

What:  The per-request object handed to every route handler.
How:   Wraps the Starlette ``Request``, carries the parameters captured by the
       matched route, and accepts exactly one response. The router reads the
       response back once the handler returns.
"""

from typing import Any, List, Optional, Sequence

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from daymare.exceptions import ResponseAlreadySentError


class Context:
    """
    Request, route parameters and a single-write response slot.

    Attributes:
        request:  The inbound Starlette request.
        params:   Captured path parameters, in group order (may be empty).
    """

    __slots__ = ("request", "params", "_response")

    def __init__(self, request: Request, params: Optional[Sequence[str]] = None):
        self.request = request
        self.params: List[str] = list(params or [])
        self._response: Optional[Response] = None

    @property
    def path(self) -> str:
        return self.request.url.path

    @property
    def method(self) -> str:
        return self.request.method

    def param(self, index: int = 0) -> str:
        """The captured parameter at ``index``."""
        return self.params[index]

    @property
    def responded(self) -> bool:
        return self._response is not None

    @property
    def response(self) -> Optional[Response]:
        return self._response

    def send(self, response: Response) -> None:
        """
        Write ``response`` as this request's answer.

        Raises:
            ResponseAlreadySentError: A response was already written.
        """
        if self._response is not None:
            raise ResponseAlreadySentError(
                f"{self.method} {self.path}: response already written "
                f"(status {self._response.status_code})"
            )
        self._response = response

    def json(self, status_code: int, payload: Any) -> None:
        """Serialize ``payload`` and write it as ``application/json``."""
        self.send(JSONResponse(status_code=status_code, content=jsonable_encoder(payload)))

    def error(self, status_code: int, message: str) -> None:
        """Write ``{"error": message}`` with ``status_code``."""
        self.json(status_code, {"error": message})
