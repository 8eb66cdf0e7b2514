"""
Daymare Backend: Article Store (Document Store Adapter)
========================================================

What:  Translates article operations into MongoDB queries on one collection.
How:   Wraps a Motor collection handed in by the entry point, converts between
       ``Article`` models and ``{_id, title, body, ctime}`` documents, and
       turns driver failures into application exceptions.
Who:   Constructed once in the application lifespan and passed to the route
       handlers; never looked up through module globals.

Error translation:
    ┌───────────────────────────────┬──────────────────────────┐
    │ Situation                     │ Raised                   │
    ├───────────────────────────────┼──────────────────────────┤
    │ id is not a valid ObjectId    │ InvalidArticleIdError    │
    │ no document with that id      │ ArticleNotFoundError     │
    │ any PyMongoError              │ StoreUnavailableError    │
    └───────────────────────────────┴──────────────────────────┘

No transactions and no retries: each call is a single round-trip.
"""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from daymare.exceptions import (
    ArticleNotFoundError,
    InvalidArticleIdError,
    StoreUnavailableError,
)
from daymare.schemas.article import Article

logger = logging.getLogger(__name__)


def to_document(article: Article) -> Dict[str, Any]:
    """Article → MongoDB document."""
    return {
        "_id": ObjectId(article.id),
        "title": article.title,
        "body": article.body,
        "ctime": article.ctime,
    }


def from_document(document: Dict[str, Any]) -> Article:
    """MongoDB document → Article. Missing text fields read as empty."""
    return Article(
        id=str(document["_id"]),
        title=document.get("title", ""),
        body=document.get("body", ""),
        ctime=document["ctime"],
    )


def parse_object_id(article_id: str) -> ObjectId:
    """
    Parse a client-supplied identifier.

    Raises:
        InvalidArticleIdError: Not 24 hex characters.
    """
    if not ObjectId.is_valid(article_id):
        raise InvalidArticleIdError(article_id)
    return ObjectId(article_id)


class ArticleStore:
    """
    Façade over the article collection.

    Operations:
        list_all()          every article, newest first
        find_by_id(id)      one article
        insert(article)     new document
        update(article)     replace the document with article.id
        delete(article)     remove the document with article.id
        ping()              connectivity check
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _unavailable(self, operation: str, error: PyMongoError) -> StoreUnavailableError:
        logger.error("MongoDB %s failed: %s", operation, error)
        return StoreUnavailableError(
            context={"operation": operation, "error": str(error), "error_type": type(error).__name__},
        )

    async def list_all(self) -> List[Article]:
        """
        All articles in reverse natural (insertion) order.

        Unfiltered and unpaginated.
        """
        try:
            cursor = self.collection.find({}).sort("$natural", -1)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._unavailable("list_all", e) from e
        return [from_document(doc) for doc in documents]

    async def find_by_id(self, article_id: str) -> Article:
        oid = parse_object_id(article_id)
        try:
            document = await self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            raise self._unavailable("find_by_id", e) from e
        if document is None:
            raise ArticleNotFoundError(article_id)
        return from_document(document)

    async def insert(self, article: Article) -> Article:
        try:
            await self.collection.insert_one(to_document(article))
        except PyMongoError as e:
            raise self._unavailable("insert", e) from e
        logger.info("Article %s inserted", article.id)
        return article

    async def update(self, article: Article) -> Article:
        """
        Replace the stored document carrying ``article.id``.

        Raises:
            ArticleNotFoundError: Nothing matched the identifier.
        """
        oid = parse_object_id(article.id)
        replacement = to_document(article)
        del replacement["_id"]
        try:
            result = await self.collection.replace_one({"_id": oid}, replacement)
        except PyMongoError as e:
            raise self._unavailable("update", e) from e
        if result.matched_count == 0:
            raise ArticleNotFoundError(article.id)
        logger.info("Article %s updated", article.id)
        return article

    async def delete(self, article: Article) -> None:
        """
        Remove the stored document carrying ``article.id``.

        Raises:
            ArticleNotFoundError: Nothing was removed.
        """
        oid = parse_object_id(article.id)
        try:
            result = await self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            raise self._unavailable("delete", e) from e
        if result.deleted_count == 0:
            raise ArticleNotFoundError(article.id)
        logger.info("Article %s deleted", article.id)

    async def ping(self) -> None:
        """
        Round-trip to the server hosting the collection.

        Raises:
            StoreUnavailableError: The server did not answer.
        """
        try:
            await self.collection.database.command("ping")
        except PyMongoError as e:
            raise self._unavailable("ping", e) from e
