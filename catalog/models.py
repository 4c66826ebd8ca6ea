"""
Pydantic models for catalog records.
Implements the Book schema and the title/author/genre search filter.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# Fields managed by the store itself; never writable through a generic update.
PROTECTED_FIELDS = frozenset({
    "id", "is_borrowed", "borrower_id", "due_date",
    "isBorrowed", "borrowerId", "dueDate",
})

# Fields a client may change after creation.
EDITABLE_FIELDS = ("title", "author", "genre")


class Book(BaseModel):
    """
    A single lending unit in the catalog.
    Serializes with camelCase keys (``isBorrowed``, ``borrowerId``, ``dueDate``).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Store-assigned book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    genre: str = Field(..., description="Book genre")
    is_borrowed: bool = Field(default=False, description="Whether a borrow is active")
    borrower_id: Optional[str] = Field(default=None, description="Current borrower, if borrowed")
    due_date: Optional[datetime] = Field(default=None, description="Return due date, if borrowed")

    @model_validator(mode="after")
    def validate_borrow_state(self) -> "Book":
        """Ensure borrower and due date are present exactly while borrowed."""
        if self.is_borrowed:
            if self.borrower_id is None or self.due_date is None:
                raise ValueError("a borrowed book requires borrower_id and due_date")
        elif self.borrower_id is not None or self.due_date is not None:
            raise ValueError("borrower_id and due_date are only allowed on a borrowed book")
        return self


class BookFilter(BaseModel):
    """Conjunctive search filter. Unset fields impose no constraint."""
    title: Optional[str] = Field(None, description="Substring of the title")
    author: Optional[str] = Field(None, description="Substring of the author")
    genre: Optional[str] = Field(None, description="Substring of the genre")

    @field_validator("title", "author", "genre")
    @classmethod
    def empty_as_unset(cls, v):
        """Treat empty query values as not supplied."""
        return v or None

    def is_empty(self) -> bool:
        """Check whether no filter value was supplied."""
        return self.title is None and self.author is None and self.genre is None

    def matches(self, book: Book) -> bool:
        """
        Check a book against every supplied filter value.

        Matching is case-sensitive substring containment, so an exact
        value also matches.
        """
        for field_name in EDITABLE_FIELDS:
            wanted = getattr(self, field_name)
            if wanted is not None and wanted not in getattr(book, field_name):
                return False
        return True
