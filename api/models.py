"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.models import Book


class BookCreate(BaseModel):
    """
    Request body for creating a book.

    Fields are optional at the schema level; the store rejects missing or
    empty values with a 400 so clients get one consistent error shape.
    """
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    genre: Optional[str] = Field(None, description="Book genre")


class BookUpdate(BaseModel):
    """Partial update. Store-managed fields may be sent but are ignored."""
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(None, description="New title")
    author: Optional[str] = Field(None, description="New author")
    genre: Optional[str] = Field(None, description="New genre")

    def changes(self) -> Dict[str, Any]:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class BorrowRequest(BaseModel):
    """Request body for borrowing a book."""
    model_config = ConfigDict(populate_by_name=True)

    borrower_id: Optional[str] = Field(None, alias="borrowerId", description="Borrower identifier")


class MessageResponse(BaseModel):
    """Response carrying only a status message."""
    message: str = Field(..., description="Outcome message")


class BookResponse(MessageResponse):
    """Response wrapping a single book."""
    data: Book = Field(..., description="The affected book")


class BookListResponse(MessageResponse):
    """Response wrapping a list of books."""
    data: List[Book] = Field(..., description="Books in catalog order")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    total_books: int = Field(..., description="Books currently in the catalog")
