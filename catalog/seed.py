"""
Starter catalog loaded when the API boots.
"""

from typing import List

from catalog.models import Book


def seed_books() -> List[Book]:
    """Return a fresh copy of the starter catalog."""
    return [
        Book(id="1", title="The Great Gatsby", author="F. Scott Fitzgerald", genre="Fiction"),
        Book(id="2", title="1984", author="George Orwell", genre="Dystopian"),
        Book(id="3", title="To Kill a Mockingbird", author="Harper Lee", genre="Classic"),
    ]
