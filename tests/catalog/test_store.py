"""
Unit tests for the in-memory catalog store.
Tests CRUD, search, borrow/return lifecycle and copy isolation.
"""

import threading
from datetime import timedelta

import pytest

from catalog.exceptions import ValidationError
from catalog.models import Book
from catalog.store import CatalogStore


class TestListAndGet:
    """Test cases for reading the catalog."""

    def test_list_books_in_insertion_order(self, store):
        """Test that listing keeps insertion order."""
        titles = [book.title for book in store.list_books()]
        assert titles == ["The Great Gatsby", "1984", "To Kill a Mockingbird"]

    def test_list_books_empty_store(self, empty_store):
        assert empty_store.list_books() == []
        assert len(empty_store) == 0

    def test_get_book(self, store):
        book = store.get_book("2")
        assert book.title == "1984"
        assert book.author == "George Orwell"

    def test_get_unknown_book(self, store):
        assert store.get_book("missing") is None

    def test_initial_books_are_copied_in(self):
        """Test that the store does not keep the caller's records."""
        original = Book(id="x", title="Dune", author="Frank Herbert", genre="Sci-Fi")
        store = CatalogStore(books=[original])
        original.title = "Changed"
        assert store.get_book("x").title == "Dune"


class TestFindBooks:
    """Test cases for filtered search."""

    def test_find_by_genre(self, store):
        """Test that the Fiction filter returns only Gatsby."""
        result = store.find_books(genre="Fiction")
        assert [book.id for book in result] == ["1"]

    def test_find_by_title_substring(self, store):
        result = store.find_books(title="Mocking")
        assert [book.id for book in result] == ["3"]

    def test_find_is_case_sensitive(self, store):
        assert store.find_books(author="george orwell") == []

    def test_filters_are_conjunctive(self, store):
        assert store.find_books(author="George Orwell", genre="Dystopian")[0].id == "2"
        assert store.find_books(author="George Orwell", genre="Classic") == []

    def test_no_filters_returns_everything(self, store):
        assert len(store.find_books()) == 3

    def test_empty_filter_value_imposes_no_constraint(self, store):
        assert len(store.find_books(title="", genre="")) == 3

    def test_no_match_returns_empty_list(self, store):
        assert store.find_books(title="Nonexistent") == []


class TestAddBook:
    """Test cases for creating books."""

    def test_add_book(self, store):
        """Test creating a valid book."""
        book = store.add_book(title="Dune", author="Frank Herbert", genre="Sci-Fi")

        assert book.title == "Dune"
        assert book.is_borrowed is False
        assert book.borrower_id is None
        assert book.due_date is None
        assert book.id not in {"1", "2", "3"}
        assert len(store) == 4
        assert store.list_books()[-1].id == book.id

    def test_add_generates_unique_ids(self, empty_store):
        ids = {empty_store.add_book("T", "A", "G").id for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.parametrize("title,author,genre,missing", [
        (None, "Author", "Genre", ["title"]),
        ("Title", "", "Genre", ["author"]),
        ("Title", "Author", "   ", ["genre"]),
        (None, None, None, ["title", "author", "genre"]),
    ])
    def test_add_missing_fields(self, store, title, author, genre, missing):
        """Test that missing fields are rejected without touching the catalog."""
        with pytest.raises(ValidationError) as exc_info:
            store.add_book(title=title, author=author, genre=genre)

        assert exc_info.value.fields == missing
        assert "required" in str(exc_info.value)
        assert len(store) == 3


class TestUpdateBook:
    """Test cases for partial updates."""

    def test_update_fields(self, store):
        book = store.update_book("1", {"title": "Gatsby", "genre": "Novel"})

        assert book.title == "Gatsby"
        assert book.genre == "Novel"
        assert book.author == "F. Scott Fitzgerald"
        assert store.get_book("1").title == "Gatsby"

    def test_update_unknown_book(self, store):
        assert store.update_book("missing", {"title": "X"}) is None

    def test_update_ignores_protected_fields(self, store, fixed_now):
        """Test that id and borrow state cannot be forged through update."""
        book = store.update_book("1", {
            "id": "999",
            "isBorrowed": True,
            "is_borrowed": True,
            "borrowerId": "mallory",
            "due_date": fixed_now,
            "title": "New Title",
        })

        assert book.id == "1"
        assert book.title == "New Title"
        assert book.is_borrowed is False
        assert book.borrower_id is None
        assert book.due_date is None
        assert store.get_book("999") is None

    def test_update_keeps_active_borrow(self, store):
        store.borrow_book("2", "alice")
        book = store.update_book("2", {"borrowerId": "bob", "isBorrowed": False})

        assert book.is_borrowed is True
        assert book.borrower_id == "alice"

    def test_update_ignores_unknown_fields(self, store):
        book = store.update_book("3", {"pages": 281})
        assert book == store.get_book("3")

    def test_update_with_empty_value(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.update_book("1", {"title": ""})

        assert exc_info.value.fields == ["title"]
        assert store.get_book("1").title == "The Great Gatsby"


class TestDeleteBook:
    """Test cases for deletion."""

    def test_delete_twice(self, store):
        assert store.delete_book("2") is True
        assert store.get_book("2") is None
        assert store.delete_book("2") is False
        assert len(store) == 2


class TestBorrowAndReturn:
    """Test cases for the borrow/return lifecycle."""

    def test_borrow_book(self, store, fixed_now):
        """Test that borrowing sets borrower and a 14 day due date."""
        book = store.borrow_book("1", "user-42")

        assert book.is_borrowed is True
        assert book.borrower_id == "user-42"
        assert book.due_date == fixed_now + timedelta(days=14)
        assert store.get_book("1").is_borrowed is True

    def test_borrow_uses_configured_loan_period(self, fixed_now):
        store = CatalogStore(
            books=[Book(id="1", title="T", author="A", genre="G")],
            loan_period_days=7,
            clock=lambda: fixed_now,
        )
        assert store.borrow_book("1", "u").due_date == fixed_now + timedelta(days=7)

    def test_borrow_missing_and_already_borrowed_look_the_same(self, store):
        """Test that both failure causes produce the same outcome."""
        assert store.borrow_book("1", "alice") is not None

        already_borrowed = store.borrow_book("1", "bob")
        missing = store.borrow_book("missing", "bob")

        assert already_borrowed is None
        assert missing is None
        assert store.get_book("1").borrower_id == "alice"

    def test_borrow_requires_borrower(self, store):
        with pytest.raises(ValidationError):
            store.borrow_book("1", "")
        assert store.get_book("1").is_borrowed is False

    def test_return_book(self, store):
        store.borrow_book("3", "alice")
        book = store.return_book("3")

        assert book.is_borrowed is False
        assert book.borrower_id is None
        assert book.due_date is None
        assert store.get_book("3").is_borrowed is False

    def test_return_not_borrowed(self, store):
        before = store.get_book("2")
        assert store.return_book("2") is None
        assert store.get_book("2") == before

    def test_return_unknown_book(self, store):
        assert store.return_book("missing") is None

    def test_borrow_again_after_return(self, store):
        store.borrow_book("1", "alice")
        store.return_book("1")
        assert store.borrow_book("1", "bob").borrower_id == "bob"

    def test_concurrent_borrows_lend_once(self, store):
        """Test that only one of many racing borrowers wins."""
        results = []
        barrier = threading.Barrier(8)

        def borrow(n):
            barrier.wait()
            results.append(store.borrow_book("1", f"user-{n}"))

        threads = [threading.Thread(target=borrow, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        winners = [book for book in results if book is not None]
        assert len(winners) == 1
        assert store.get_book("1").borrower_id == winners[0].borrower_id


class TestRecommendations:
    """Test cases for recommendations."""

    def test_first_three_in_order(self, store):
        store.add_book("Dune", "Frank Herbert", "Sci-Fi")
        assert [book.id for book in store.get_recommendations()] == ["1", "2", "3"]

    def test_fewer_than_three(self, empty_store):
        empty_store.add_book("Dune", "Frank Herbert", "Sci-Fi")
        assert len(empty_store.get_recommendations()) == 1

    def test_empty_catalog(self, empty_store):
        assert empty_store.get_recommendations() == []


class TestCopyIsolation:
    """Test that returned values never alias stored records."""

    def test_mutating_listed_book(self, store):
        store.list_books()[0].title = "Hacked"
        assert store.get_book("1").title == "The Great Gatsby"

    def test_mutating_added_book(self, store):
        book = store.add_book("Dune", "Frank Herbert", "Sci-Fi")
        book.genre = "Hacked"
        assert store.get_book(book.id).genre == "Sci-Fi"

    def test_mutating_borrowed_book(self, store):
        book = store.borrow_book("1", "alice")
        book.borrower_id = "mallory"
        assert store.get_book("1").borrower_id == "alice"

    def test_mutating_search_and_recommendation_results(self, store):
        store.find_books(genre="Fiction")[0].author = "Hacked"
        store.get_recommendations()[1].title = "Hacked"

        assert store.get_book("1").author == "F. Scott Fitzgerald"
        assert store.get_book("2").title == "1984"
