from typing import List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Depends
from pydantic import BaseModel, Field

from book import BookBuilder
from config import Settings, settings
from exceptions import BookNotFoundError, DuplicateBookError, InvalidOperationError
from library import LibraryManager
from logging_setup import configure_logging
from notifications import RecordingNotifier
from observers import User


_settings = Settings.from_env()
manager = LibraryManager(RecordingNotifier(max_messages=_settings.notification_outbox_size), _settings)


def get_manager() -> LibraryManager:
    """Dependency returning the manager owned by this app."""
    return manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield

app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

# --- Modeller ---
class BookModel(BaseModel):
    title: str
    author: str
    identifier: str

class BookCreateModel(BaseModel):
    title: str = ""
    author: str = ""
    identifier: str = Field(..., description="Catalog key")

class LoanRequestModel(BaseModel):
    identifier: str
    borrower: str

class LoanModel(BaseModel):
    identifier: str
    borrower: str
    timestamp: str

class ObserverCreateModel(BaseModel):
    user_id: str

class StatsModel(BaseModel):
    total_books: int
    unique_authors: int
    active_loans: int
    observers: int

class NotificationModel(BaseModel):
    to: str
    message: str

# --- Sağlık Kontrolü ---
@app.get("/health")
def health():
    return {"status": "ok", "app": settings.app_name, "version": settings.app_version}

# --- Kitaplar ---
@app.get("/books", response_model=List[BookModel])
def get_books(
    title: Optional[str] = Query(None, description="Title substring (case-sensitive)"),
    author: Optional[str] = Query(None, description="Author substring (case-sensitive)"),
    lib: LibraryManager = Depends(get_manager),
):
    """List the catalog, or search it by title and/or author."""
    if title is None and author is None:
        books = lib.list_books()
    elif author is None:
        books = lib.search_by_title(title)
    elif title is None:
        books = lib.search_by_author(author)
    else:
        books = [b for b in lib.search_by_title(title) if author in b.author]
    return [BookModel(**b.to_dict()) for b in books]

@app.get("/books/{identifier}", response_model=BookModel)
def get_book(identifier: str, lib: LibraryManager = Depends(get_manager)):
    book = lib.search_by_identifier(identifier)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found.")
    return BookModel(**book.to_dict())

@app.post("/books", response_model=BookModel, status_code=201)
def add_book(payload: BookCreateModel, lib: LibraryManager = Depends(get_manager)):
    builder = BookBuilder().with_title(payload.title).with_author(payload.author).with_identifier(payload.identifier)
    try:
        book = lib.add_book(builder)
    except DuplicateBookError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return BookModel(**book.to_dict())

@app.delete("/books/{identifier}")
def delete_book(identifier: str, lib: LibraryManager = Depends(get_manager)):
    if not lib.remove_book(identifier):
        raise HTTPException(status_code=404, detail="Book not found.")
    return {"message": "Book removed."}

# --- Gözlemciler ---
@app.post("/observers", status_code=201)
def add_observer(payload: ObserverCreateModel, lib: LibraryManager = Depends(get_manager)):
    lib.add_observer(User(payload.user_id))
    return {"message": f"Observer {payload.user_id} registered."}

# --- Ödünçler ---
@app.get("/loans", response_model=List[LoanModel])
def get_loans(borrower: Optional[str] = Query(None), lib: LibraryManager = Depends(get_manager)):
    return [LoanModel(**loan.to_dict()) for loan in lib.list_loans(borrower)]

@app.post("/loans", response_model=LoanModel, status_code=201)
def loan_book(payload: LoanRequestModel, lib: LibraryManager = Depends(get_manager)):
    try:
        loan = lib.loan_book(payload.identifier, payload.borrower)
    except BookNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidOperationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return LoanModel(**loan.to_dict())

@app.post("/loans/return", response_model=LoanModel)
def return_book(payload: LoanRequestModel, lib: LibraryManager = Depends(get_manager)):
    try:
        loan = lib.return_book(payload.identifier, payload.borrower)
    except InvalidOperationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return LoanModel(**loan.to_dict())

# --- İstatistikler ve bildirimler ---
@app.get("/stats", response_model=StatsModel)
def get_library_stats(lib: LibraryManager = Depends(get_manager)):
    return StatsModel(**lib.get_statistics())

@app.get("/notifications", response_model=List[NotificationModel])
def get_notifications(lib: LibraryManager = Depends(get_manager)):
    """Most recent messages sent by the recording mail service (bounded by NOTIFICATION_OUTBOX_SIZE)."""
    outbox = getattr(lib.notifier, "outbox", [])
    return [NotificationModel(to=to, message=message) for to, message in outbox]
