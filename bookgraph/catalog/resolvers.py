"""
Data access functions behind the GraphQL fields.

Every function takes the ``LibraryStore`` explicitly so the GraphQL
layer can inject whatever store the application was built with. None
of them raises for a missing entity: absence is reported as ``None``
(single lookups) or an empty list (collections), which is what the
GraphQL layer returns to callers as ``null`` / ``[]``.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from ..events import BOOK_ADDED, BookEventBus
from ..models import Author, Book, DeleteResult
from ..storage import LibraryStore

logger = logging.getLogger(__name__)


class HasAuthorId(Protocol):
    """A book record or the GraphQL object built from one."""

    author_id: str


class HasId(Protocol):
    id: str


def list_books(store: LibraryStore) -> List[Book]:
    return store.books


def get_book(store: LibraryStore, book_id: str) -> Optional[Book]:
    return next((b for b in store.books if b.id == book_id), None)


def list_authors(store: LibraryStore) -> List[Author]:
    return store.authors


def get_author(store: LibraryStore, author_id: str) -> Optional[Author]:
    return next((a for a in store.authors if a.id == author_id), None)


def create_book(
    store: LibraryStore,
    bus: BookEventBus,
    author_id: str,
    title: str,
    release_year: int,
) -> Book:
    """Append a new book and announce it on ``BOOK_ADDED``.

    Parameters
    ----------
    store : LibraryStore
        Target store.
    bus : BookEventBus
        Bus the created book is published on.
    author_id : str
        Referenced author. Not checked against the author list.
    title : str
        Book title.
    release_year : int
        Year of release.

    Returns
    -------
    Book
        The stored book. Its id is the new collection length rendered
        as a string, so it can collide with an existing id once books
        have been deleted.
    """
    book = Book(
        id=store.next_book_id(),
        title=title,
        release_year=release_year,
        author_id=author_id,
    )
    store.add_book(book)
    reached = bus.publish(BOOK_ADDED, book)
    logger.debug("createBook id=%s published to %d subscriber(s)", book.id, reached)
    return book


def update_book(
    store: LibraryStore,
    book_id: str,
    author_id: str,
    title: str,
    release_year: int,
) -> Optional[Book]:
    """Overwrite every mutable field of the first book with ``book_id``.

    Returns ``None`` and leaves the store untouched when no book matches.
    """
    index = store.find_book_index(book_id)
    if index is None:
        logger.debug("updateBook id=%s: no such book", book_id)
        return None
    updated = store.books[index].model_copy(
        update={"author_id": author_id, "title": title, "release_year": release_year}
    )
    store.replace_book(index, updated)
    logger.debug("updateBook id=%s", book_id)
    return updated


def delete_book(store: LibraryStore, book_id: str) -> DeleteResult:
    # Same acknowledgement whether or not anything was removed.
    removed = store.remove_books(book_id)
    logger.debug("deleteBook id=%s removed %d", book_id, removed)
    return DeleteResult()


def author_of(store: LibraryStore, book: HasAuthorId) -> Optional[Author]:
    return get_author(store, book.author_id)


def books_by(store: LibraryStore, author: HasId) -> List[Book]:
    return [b for b in store.books if b.author_id == author.id]
