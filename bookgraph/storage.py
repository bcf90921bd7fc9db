# bookgraph/storage.py
from typing import List, Optional

from .models import Author, Book


SEED_BOOKS = [
    {"id": "1", "title": "Book 1", "release_year": 2000, "author_id": "1"},
    {"id": "2", "title": "Book 2", "release_year": 2010, "author_id": "2"},
]

SEED_AUTHORS = [
    {"id": "1", "name": "Author 1"},
    {"id": "2", "name": "Author 2"},
]


def _seed_books() -> List[Book]:
    return [Book(**entry) for entry in SEED_BOOKS]


def _seed_authors() -> List[Author]:
    return [Author(**entry) for entry in SEED_AUTHORS]


class LibraryStore:
    """In-process book and author collections.

    Lives for the lifetime of the process. Only resolver code mutates it,
    always from the event loop thread, so there is no locking.
    """

    def __init__(
        self,
        books: Optional[List[Book]] = None,
        authors: Optional[List[Author]] = None,
    ):
        self.books: List[Book] = _seed_books() if books is None else list(books)
        self.authors: List[Author] = _seed_authors() if authors is None else list(authors)

    @classmethod
    def empty(cls) -> "LibraryStore":
        return cls(books=[], authors=[])

    def reset(self) -> None:
        self.books = _seed_books()
        self.authors = _seed_authors()

    def next_book_id(self) -> str:
        # Positional: reuses an id after a delete.
        return str(len(self.books) + 1)

    def add_book(self, book: Book) -> Book:
        self.books.append(book)
        return book

    def find_book_index(self, book_id: str) -> Optional[int]:
        return next(
            (i for i, b in enumerate(self.books) if b.id == book_id), None
        )

    def replace_book(self, index: int, book: Book) -> Book:
        self.books[index] = book
        return book

    def remove_books(self, book_id: str) -> int:
        before = len(self.books)
        self.books = [b for b in self.books if b.id != book_id]
        return before - len(self.books)
