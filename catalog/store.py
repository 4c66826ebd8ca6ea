"""
In-memory catalog store.
Owns the collection of Book records and every operation that reads or
mutates it: listing, search, CRUD, borrow/return and recommendations.
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from catalog.exceptions import ValidationError
from catalog.models import EDITABLE_FIELDS, PROTECTED_FIELDS, Book, BookFilter
from utilities.logger import CatalogLogger

DEFAULT_LOAN_PERIOD_DAYS = 14
DEFAULT_RECOMMENDATION_COUNT = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class CatalogStore:
    """
    In-memory owner of all Book records.

    Every read hands back deep copies, so callers can never mutate stored
    records. A single re-entrant lock serializes all operations; FastAPI
    runs sync handlers on a thread pool.
    """

    def __init__(
        self,
        books: Optional[Iterable[Book]] = None,
        loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS,
        recommendation_count: int = DEFAULT_RECOMMENDATION_COUNT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the catalog store.

        Args:
            books: Initial records, kept in the given order
            loan_period_days: Length of the borrow window
            recommendation_count: Number of books returned as recommendations
            clock: Returns the current time; defaults to timezone-aware UTC now
        """
        self.loan_period_days = loan_period_days
        self.recommendation_count = recommendation_count
        self._clock = clock or _utcnow
        self._lock = threading.RLock()
        self._books: List[Book] = [book.model_copy(deep=True) for book in (books or [])]
        self.logger = CatalogLogger(__name__).bind_context(component="catalog_store")

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    def _find_index(self, book_id: str) -> Optional[int]:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None

    def _new_id(self) -> str:
        existing = {book.id for book in self._books}
        book_id = str(uuid.uuid4())
        while book_id in existing:
            book_id = str(uuid.uuid4())
        return book_id

    @staticmethod
    def _copy(book: Book) -> Book:
        return book.model_copy(deep=True)

    def list_books(self) -> List[Book]:
        """Return copies of every book in insertion order."""
        with self._lock:
            return [self._copy(book) for book in self._books]

    def get_book(self, book_id: str) -> Optional[Book]:
        """Return a copy of one book, or None when the id is unknown."""
        with self._lock:
            index = self._find_index(book_id)
            if index is None:
                return None
            return self._copy(self._books[index])

    def find_books(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> List[Book]:
        """
        Search the catalog.

        Args:
            title: Case-sensitive substring of the title
            author: Case-sensitive substring of the author
            genre: Case-sensitive substring of the genre

        Returns:
            Copies of every book matching all supplied values, in store order
        """
        book_filter = BookFilter(title=title, author=author, genre=genre)
        with self._lock:
            return [self._copy(book) for book in self._books if book_filter.matches(book)]

    def add_book(self, title: Optional[str], author: Optional[str], genre: Optional[str]) -> Book:
        """
        Create a new book with a store-assigned id.

        Args:
            title: Book title (required, non-empty)
            author: Book author (required, non-empty)
            genre: Book genre (required, non-empty)

        Returns:
            Copy of the created book, not borrowed

        Raises:
            ValidationError: If any required field is missing or empty
        """
        supplied = {"title": title, "author": author, "genre": genre}
        missing = [name for name, value in supplied.items() if not _is_filled(value)]
        if missing:
            self.logger.log_rejected("add", reason=f"missing fields: {', '.join(missing)}")
            raise ValidationError(
                "Missing required fields: title, author, and genre are required",
                fields=missing,
            )

        with self._lock:
            book = Book(id=self._new_id(), title=title, author=author, genre=genre)
            self._books.append(book)
            self.logger.log_book_added(book.id, book.title)
            return self._copy(book)

    def update_book(self, book_id: str, changes: Dict[str, Any]) -> Optional[Book]:
        """
        Apply a partial update to a book.

        Only title, author and genre can change. Store-managed fields (id,
        borrow state) and unknown keys are dropped without error.

        Args:
            book_id: Id of the book to update
            changes: Field values to apply

        Returns:
            Copy of the updated book, or None when the id is unknown

        Raises:
            ValidationError: If a supplied editable field is empty
        """
        safe_update = {name: value for name, value in changes.items() if name in EDITABLE_FIELDS}
        ignored = sorted(name for name in changes if name in PROTECTED_FIELDS)

        with self._lock:
            index = self._find_index(book_id)
            if index is None:
                self.logger.log_rejected("update", book_id=book_id, reason="not found")
                return None

            empty = [name for name, value in safe_update.items() if not _is_filled(value)]
            if empty:
                self.logger.log_rejected("update", book_id=book_id, reason=f"empty fields: {', '.join(empty)}")
                raise ValidationError(
                    "Updated fields must be non-empty strings",
                    fields=empty,
                )

            updated = self._books[index].model_copy(update=safe_update)
            self._books[index] = updated
            self.logger.log_book_updated(book_id, sorted(safe_update), ignored)
            return self._copy(updated)

    def delete_book(self, book_id: str) -> bool:
        """Remove a book. Returns False when the id is unknown."""
        with self._lock:
            index = self._find_index(book_id)
            if index is None:
                self.logger.log_book_deleted(book_id, success=False)
                return False
            del self._books[index]
            self.logger.log_book_deleted(book_id, success=True)
            return True

    def borrow_book(self, book_id: str, borrower_id: Optional[str]) -> Optional[Book]:
        """
        Lend a book for one borrow window.

        Args:
            book_id: Id of the book to borrow
            borrower_id: Identifier of the borrower

        Returns:
            Copy of the borrowed book, or None when the id is unknown
            or the book is already borrowed

        Raises:
            ValidationError: If borrower_id is missing or empty
        """
        if not _is_filled(borrower_id):
            self.logger.log_rejected("borrow", book_id=book_id, reason="missing borrower_id")
            raise ValidationError("Missing required field: borrowerId", fields=["borrowerId"])

        with self._lock:
            index = self._find_index(book_id)
            if index is None or self._books[index].is_borrowed:
                self.logger.log_rejected("borrow", book_id=book_id, reason="not found or already borrowed")
                return None

            due_date = self._clock() + timedelta(days=self.loan_period_days)
            borrowed = self._books[index].model_copy(update={
                "is_borrowed": True,
                "borrower_id": borrower_id,
                "due_date": due_date,
            })
            self._books[index] = borrowed
            self.logger.log_book_borrowed(book_id, borrower_id, due_date.isoformat())
            return self._copy(borrowed)

    def return_book(self, book_id: str) -> Optional[Book]:
        """
        Close an active borrow.

        Returns a copy of the returned book, or None when the id is unknown
        or the book is not currently borrowed.
        """
        with self._lock:
            index = self._find_index(book_id)
            if index is None or not self._books[index].is_borrowed:
                self.logger.log_rejected("return", book_id=book_id, reason="not found or not borrowed")
                return None

            current = self._books[index]
            returned = current.model_copy(update={
                "is_borrowed": False,
                "borrower_id": None,
                "due_date": None,
            })
            self._books[index] = returned
            self.logger.log_book_returned(book_id, current.borrower_id)
            return self._copy(returned)

    def get_recommendations(self) -> List[Book]:
        """Return copies of the first books in store order."""
        with self._lock:
            return [self._copy(book) for book in self._books[:self.recommendation_count]]
