# shelf/sa/repositories/book.py
from typing import List, Optional
from shelf.sa.models import Book, Folder
from .base import OwnedRepository

class BookRepository(OwnedRepository):
    """Repository for managing Book entities."""
    model = Book

    def get_by_status(self, status: str) -> List[Book]:
        """Get all books with a reading status"""
        return self.list(status=status)

    def get_in_folder(self, folder_id: Optional[str]) -> List[Book]:
        """Get the books of a folder, or the folderless books when folder_id is None"""
        return self.list(folder_id=folder_id)

    def search(self, query: str, limit: int = 20) -> List[Book]:
        """Search books by title or author.

        Args:
            query: The search query string
            limit: Maximum number of results to return (default: 20)

        Returns:
            List of matching Book objects
        """
        pattern = f"%{query}%"
        return (
            self._query()
            .filter(Book.title.ilike(pattern) | Book.author.ilike(pattern))
            .order_by(Book.title)
            .limit(limit)
            .all()
        )

class FolderRepository(OwnedRepository):
    """Repository for managing Folder entities."""
    model = Folder

    def get_by_status(self, status: str) -> List[Folder]:
        """Get the folders of a status bucket"""
        return self.list(status=status)
