# shelf/sa/repositories/memo.py
from typing import List
from sqlalchemy import desc
from shelf.sa.models import InsightMemo
from .base import OwnedRepository

class InsightMemoRepository(OwnedRepository):
    """Repository for managing InsightMemo entities."""
    model = InsightMemo

    def get_by_book(self, book_id: str) -> List[InsightMemo]:
        """Get the memos of a book, pinned first then newest first"""
        return (
            self._query()
            .filter(InsightMemo.book_id == book_id)
            .order_by(desc(InsightMemo.pinned), desc(InsightMemo.created_at))
            .all()
        )
