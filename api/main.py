"""
FastAPI main application for the Library Catalog API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from api.config import config as api_config
from api.models import (
    BookCreate, BookUpdate, BorrowRequest,
    BookResponse, BookListResponse, MessageResponse,
    ErrorResponse, HealthResponse
)
from catalog.exceptions import ValidationError
from catalog.seed import seed_books
from catalog.store import CatalogStore
from utilities.config import config
from utilities.logger import setup_logging

logger = structlog.get_logger(__name__)


def build_store() -> CatalogStore:
    """Create the catalog store from configuration."""
    return CatalogStore(
        books=seed_books() if config.seed_catalog else None,
        loan_period_days=config.loan_period_days,
        recommendation_count=config.recommendation_count,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug,
    )
    app.state.store = build_store()
    logger.info("Starting Library Catalog API", total_books=len(app.state.store))

    yield

    logger.info("Shutting down Library Catalog API")


def get_store(request: Request) -> CatalogStore:
    """Dependency returning the store owned by the running application."""
    return request.app.state.store


def _json(payload: BaseModel, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    # camelCase keys; borrower/due date omitted while a book is on the shelf
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _not_found(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)


app = FastAPI(
    title=api_config.api_title,
    description=api_config.api_description,
    version=api_config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions, including unmatched routes."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            status_code=exc.status_code
        ).model_dump(),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(request, exc: ValidationError):
    """Answer missing or empty book fields with 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error=exc.message,
            detail={"fields": exc.fields},
            status_code=status.HTTP_400_BAD_REQUEST
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(store: CatalogStore = Depends(get_store)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        total_books=len(store)
    )


router = APIRouter(prefix=api_config.api_prefix, tags=["Books"])


@router.get("", response_model=BookListResponse)
def get_books(
    title: Optional[str] = None,
    author: Optional[str] = None,
    genre: Optional[str] = None,
    store: CatalogStore = Depends(get_store)
):
    """
    List the catalog, or search it when any filter is given.

    - **title**: Case-sensitive substring of the title
    - **author**: Case-sensitive substring of the author
    - **genre**: Case-sensitive substring of the genre
    """
    if title or author or genre:
        books = store.find_books(title=title, author=author, genre=genre)
    else:
        books = store.list_books()
    return _json(BookListResponse(message="Books retrieved", data=books))


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def add_book(book: BookCreate, store: CatalogStore = Depends(get_store)):
    """Add a book. Title, author and genre are required."""
    created = store.add_book(title=book.title, author=book.author, genre=book.genre)
    return _json(BookResponse(message="Book added", data=created), status.HTTP_201_CREATED)


@router.get("/recommendations", response_model=BookListResponse)
def get_recommendations(store: CatalogStore = Depends(get_store)):
    """Get recommended books."""
    return _json(BookListResponse(
        message="Recommendations retrieved",
        data=store.get_recommendations()
    ))


@router.get("/{book_id}", response_model=BookResponse)
def get_book(book_id: str, store: CatalogStore = Depends(get_store)):
    """Get a single book by ID."""
    book = store.get_book(book_id)
    if book is None:
        raise _not_found("Book not found")
    return _json(BookResponse(message="Book retrieved", data=book))


@router.put("/{book_id}", response_model=BookResponse)
def update_book(book_id: str, update: BookUpdate, store: CatalogStore = Depends(get_store)):
    """
    Update title, author or genre of a book.

    Borrowing state and the id cannot be changed here; such fields are ignored.
    """
    updated = store.update_book(book_id, update.changes())
    if updated is None:
        raise _not_found("Book not found")
    return _json(BookResponse(message="Book updated", data=updated))


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(book_id: str, store: CatalogStore = Depends(get_store)):
    """Delete a book."""
    if not store.delete_book(book_id):
        raise _not_found("Book not found")
    return _json(MessageResponse(message="Book deleted"))


@router.post("/{book_id}/borrow", response_model=BookResponse)
def borrow_book(
    book_id: str,
    borrow: Optional[BorrowRequest] = None,
    store: CatalogStore = Depends(get_store)
):
    """Borrow a book for one borrow window."""
    borrower_id = borrow.borrower_id if borrow else None
    borrowed = store.borrow_book(book_id, borrower_id)
    if borrowed is None:
        raise _not_found("Book not found or already borrowed")
    return _json(BookResponse(message="Book borrowed", data=borrowed))


@router.post("/{book_id}/return", response_model=BookResponse)
def return_book(book_id: str, store: CatalogStore = Depends(get_store)):
    """Return a borrowed book."""
    returned = store.return_book(book_id)
    if returned is None:
        raise _not_found("Book not found or not currently borrowed")
    return _json(BookResponse(message="Book returned", data=returned))


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=config.log_level.lower()
    )
