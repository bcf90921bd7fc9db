"""
Strawberry schema definitions for the catalog.

The GraphQL types mirror the records in ``bookgraph.models``; root
fields delegate to ``bookgraph.catalog.resolvers``. Resolvers find the
store and the event bus in the execution context under ``"store"`` and
``"bus"``, which the router's context getter (or a test calling
``schema.execute`` directly) provides.
"""

from typing import AsyncGenerator, List, Optional

import strawberry
from strawberry.types import Info

from ..events import BOOK_ADDED, BookEventBus
from ..models import Author, Book, DeleteResult
from ..storage import LibraryStore
from . import resolvers


def _store(info: Info) -> LibraryStore:
    return info.context["store"]


def _bus(info: Info) -> BookEventBus:
    return info.context["bus"]


@strawberry.type(name="Book")
class BookType:
    id: strawberry.ID
    title: str
    release_year: int
    author_id: strawberry.ID

    @classmethod
    def from_model(cls, book: Book) -> "BookType":
        return cls(
            id=strawberry.ID(book.id),
            title=book.title,
            release_year=book.release_year,
            author_id=strawberry.ID(book.author_id),
        )

    @strawberry.field
    def author(self, info: Info) -> Optional["AuthorType"]:
        author = resolvers.author_of(_store(info), self)
        return AuthorType.from_model(author) if author else None


@strawberry.type(name="Author")
class AuthorType:
    id: strawberry.ID
    name: str

    @classmethod
    def from_model(cls, author: Author) -> "AuthorType":
        return cls(id=strawberry.ID(author.id), name=author.name)

    @strawberry.field
    def books(self, info: Info) -> List[BookType]:
        return [BookType.from_model(b) for b in resolvers.books_by(_store(info), self)]


@strawberry.type(name="DeleteResponse")
class DeleteResponseType:
    message: str

    @classmethod
    def from_model(cls, result: DeleteResult) -> "DeleteResponseType":
        return cls(message=result.message)


@strawberry.type
class Query:
    @strawberry.field
    def books(self, info: Info) -> List[BookType]:
        return [BookType.from_model(b) for b in resolvers.list_books(_store(info))]

    @strawberry.field
    def book(self, info: Info, id: strawberry.ID) -> Optional[BookType]:
        book = resolvers.get_book(_store(info), id)
        return BookType.from_model(book) if book else None

    @strawberry.field
    def authors(self, info: Info) -> List[AuthorType]:
        return [AuthorType.from_model(a) for a in resolvers.list_authors(_store(info))]

    @strawberry.field
    def author(self, info: Info, id: strawberry.ID) -> Optional[AuthorType]:
        author = resolvers.get_author(_store(info), id)
        return AuthorType.from_model(author) if author else None


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create_book(
        self,
        info: Info,
        author_id: strawberry.ID,
        title: str,
        release_year: int,
    ) -> BookType:
        book = resolvers.create_book(
            _store(info), _bus(info), author_id, title, release_year
        )
        return BookType.from_model(book)

    @strawberry.mutation
    def update_book(
        self,
        info: Info,
        id: strawberry.ID,
        author_id: strawberry.ID,
        title: str,
        release_year: int,
    ) -> Optional[BookType]:
        book = resolvers.update_book(_store(info), id, author_id, title, release_year)
        return BookType.from_model(book) if book else None

    @strawberry.mutation
    def delete_book(self, info: Info, id: strawberry.ID) -> DeleteResponseType:
        return DeleteResponseType.from_model(resolvers.delete_book(_store(info), id))


@strawberry.type
class Subscription:
    @strawberry.subscription
    async def book_added(self, info: Info) -> AsyncGenerator[BookType, None]:
        """Stream every book created after the subscription opens."""
        async with _bus(info).subscribe(BOOK_ADDED) as stream:
            async for book in stream:
                yield BookType.from_model(book)


# Shared by the HTTP and websocket transports.
schema = strawberry.Schema(query=Query, mutation=Mutation, subscription=Subscription)
