# api/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelf.config import settings
from shelf.sa.database import database_for
from shelf.sa.repositories import (
    BookRepository, FolderRepository, TagRepository, BookTagRepository, InsightMemoRepository
)
from shelf.schemas import (
    Book, BookCreate, BookUpdate, Folder, FolderCreate, FolderUpdate, Tag, TagCreate, TagUpdate,
    BookTag, BookTagCreate, BookTagUpdate, InsightMemo, InsightMemoCreate, InsightMemoUpdate
)
from api.routes.records import crud_router

app = FastAPI(title="Insight Shelf")

# CORS configuration
origins = [
    "http://localhost:3000",        # Local Next.js dev server
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    database_for(settings.database_url).init_db()

@app.get("/")
async def root():
    return {"message": "Insight Shelf"}

app.include_router(crud_router("/books", BookRepository, Book, BookCreate, BookUpdate,
                               filters=("status", "folder_id")))
app.include_router(crud_router("/folders", FolderRepository, Folder, FolderCreate, FolderUpdate,
                               filters=("status",)))
app.include_router(crud_router("/tags", TagRepository, Tag, TagCreate, TagUpdate,
                               filters=("name",)))
app.include_router(crud_router("/book-tags", BookTagRepository, BookTag, BookTagCreate, BookTagUpdate,
                               filters=("book_id", "tag_id")))
app.include_router(crud_router("/memos", InsightMemoRepository, InsightMemo, InsightMemoCreate, InsightMemoUpdate,
                               filters=("book_id", "type")))
