import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from library_app.context import LibraryContext, create_context
from library_app.errors import LibraryError
from library_app.logging_config import setup_logging
from library_app.validators import parse_identifier

logger = logging.getLogger(__name__)

FIELDS_HELP = "Comma-separated fields to return, e.g. id,title,checkedOutBy.firstName"

router = APIRouter()


# --- Models ---
class CheckOutRequest(BaseModel):
    """Checkout mutation payload.  Ids are typed loosely so that malformed
    values reach the identifier validator and come back as INVALID_ID_FORMAT."""

    model_config = ConfigDict(populate_by_name=True)

    book_id: Any = Field(alias="bookId")
    person_id: Any = Field(alias="personId")


class ReturnRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book_id: Any = Field(alias="bookId")


class HealthModel(BaseModel):
    status: str
    version: str
    timestamp: str
    total_books: int
    checked_out_books: int
    total_persons: int


# --- Dependencies ---
def get_context(request: Request) -> LibraryContext:
    return request.app.state.context


# --- Health ---
@router.get("/health", response_model=HealthModel)
def health(context: LibraryContext = Depends(get_context)):
    """Lightweight liveness endpoint with catalog counts."""
    books = context.service.get_all_books()
    return HealthModel(
        status="healthy",
        version=context.settings.app_version,
        timestamp=datetime.now(timezone.utc).isoformat(),
        total_books=len(books),
        checked_out_books=sum(1 for b in books if b.checked_out_by_id is not None),
        total_persons=len(context.service.get_persons()),
    )


# --- Queries ---
@router.get("/books")
def get_all_books(
    fields: Optional[str] = Query(default=None, description=FIELDS_HELP),
    context: LibraryContext = Depends(get_context),
) -> List[Dict[str, Any]]:
    """List every book.  Related persons are loaded only if ``checkedOutBy`` is requested."""
    return context.resolver.resolve_books(context.service.get_all_books(), fields)


@router.get("/books/{book_id:path}")
def get_book_for_id(
    book_id: str,
    fields: Optional[str] = Query(default=None, description=FIELDS_HELP),
    context: LibraryContext = Depends(get_context),
) -> Dict[str, Any]:
    book = context.service.get_book(parse_identifier("bookId", book_id))
    return context.resolver.resolve_book(book, fields)


@router.get("/persons")
def get_persons(
    fields: Optional[str] = Query(default=None, description=FIELDS_HELP),
    context: LibraryContext = Depends(get_context),
) -> List[Dict[str, Any]]:
    return context.resolver.resolve_persons(context.service.get_persons(), fields)


@router.get("/persons/{person_id:path}/books")
def get_person_loans(
    person_id: str,
    fields: Optional[str] = Query(default=None, description=FIELDS_HELP),
    context: LibraryContext = Depends(get_context),
) -> List[Dict[str, Any]]:
    """Books currently checked out by one person."""
    books = context.service.get_books_checked_out_by(parse_identifier("personId", person_id))
    return context.resolver.resolve_books(books, fields)


# --- Mutations ---
@router.post("/books/checkout")
def check_out_book(
    payload: CheckOutRequest,
    fields: Optional[str] = Query(default=None, description=FIELDS_HELP),
    context: LibraryContext = Depends(get_context),
) -> Dict[str, Any]:
    book_id = parse_identifier("bookId", payload.book_id)
    person_id = parse_identifier("personId", payload.person_id)
    book = context.service.check_out_book(book_id, person_id)
    return context.resolver.resolve_book(book, fields)


@router.post("/books/return")
def return_book(
    payload: ReturnRequest,
    fields: Optional[str] = Query(default=None, description=FIELDS_HELP),
    context: LibraryContext = Depends(get_context),
) -> Dict[str, Any]:
    book = context.service.return_book(parse_identifier("bookId", payload.book_id))
    return context.resolver.resolve_book(book, fields)


# --- Error handling ---
async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    logger.info("%s %s failed: %s %s", request.method, request.url.path, exc.code, exc.metadata)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(context: Optional[LibraryContext] = None) -> FastAPI:
    """Build the FastAPI application around ``context`` (a fresh seeded one by default)."""
    context = context or create_context()
    setup_logging(context.settings.log_level, context.settings.log_file)

    app = FastAPI(title=context.settings.app_name, version=context.settings.app_version, debug=context.settings.debug)
    app.state.context = context
    app.add_exception_handler(LibraryError, library_error_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    app.include_router(router)
    return app


app = create_app()
