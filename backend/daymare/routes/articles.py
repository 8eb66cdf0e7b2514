"""
Daymare Backend: Article Route Handlers
========================================

What:  Handlers behind the article endpoints.
How:   Each handler decodes what it needs from the Context, makes one or two
       store calls and writes exactly one JSON response. Failures are raised
       as ``DaymareError`` and rendered by the router through their error kind.
Who:   Bound into the route table by ``daymare.routes.blog``.

Endpoints:
    GET     /api/index           list, newest first
    POST    /api/save            create
    GET     /api/article/{id}    read one
    PUT     /api/article/{id}    replace title and body
    DELETE  /api/article/{id}    remove
"""

import json
import logging
from datetime import datetime, timezone
from typing import Type, TypeVar

import pydantic
from bson import ObjectId

from daymare.exceptions import DecodeError, ValidationError
from daymare.router.context import Context
from daymare.schemas.article import Article, ArticleCreate, ArticleUpdate
from daymare.services.article_store import ArticleStore

logger = logging.getLogger(__name__)

BodyModel = TypeVar("BodyModel", bound=pydantic.BaseModel)


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision MongoDB keeps."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def describe_validation_error(exc: pydantic.ValidationError) -> str:
    """First schema violation as ``"<field>: <reason>"``."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{location}: {first.get('msg', 'invalid value')}"


async def decode_body(ctx: Context, model: Type[BodyModel]) -> BodyModel:
    """
    Parse the request body into ``model``.

    Raises:
        DecodeError:      The body is not JSON at all.
        ValidationError:  JSON, but not the shape ``model`` requires.
    """
    raw = await ctx.request.body()
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(context={"reason": str(e)}) from e

    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(message=describe_validation_error(e)) from e


class ArticleHandlers:
    """Article endpoints bound to one ``ArticleStore``."""

    def __init__(self, store: ArticleStore):
        self.store = store

    async def index(self, ctx: Context) -> None:
        articles = await self.store.list_all()
        ctx.json(200, articles)

    async def save(self, ctx: Context) -> None:
        """
        Create an article.

        Client-supplied ``id`` and ``ctime`` are overwritten: the identifier is
        a fresh ObjectId and the timestamp is the current time. Nothing is
        written when the body fails to decode.
        """
        data = await decode_body(ctx, ArticleCreate)
        article = Article(
            id=str(ObjectId()),
            title=data.title,
            body=data.body,
            ctime=utc_now(),
        )
        await self.store.insert(article)
        ctx.json(201, article)

    async def get_article(self, ctx: Context) -> None:
        article = await self.store.find_by_id(ctx.param(0))
        ctx.json(200, article)

    async def update_article(self, ctx: Context) -> None:
        """Replace title and body; id and ctime stay as stored."""
        data = await decode_body(ctx, ArticleUpdate)
        current = await self.store.find_by_id(ctx.param(0))
        updated = current.model_copy(update={"title": data.title, "body": data.body})
        await self.store.update(updated)
        ctx.json(200, updated)

    async def delete_article(self, ctx: Context) -> None:
        article = await self.store.find_by_id(ctx.param(0))
        await self.store.delete(article)
        ctx.json(200, article)
