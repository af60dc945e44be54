# shelf/constants.py
from enum import Enum


class BookStatus(str, Enum):
    TO_READ = "TO_READ"
    READING = "READING"
    READ = "READ"


class MemoType(str, Enum):
    SUMMARY = "SUMMARY"
    QUOTE = "QUOTE"
    DATA = "DATA"


class MemoFilter(str, Enum):
    """Type filter of the memo list; ALL keeps every memo."""
    ALL = "ALL"
    SUMMARY = "SUMMARY"
    QUOTE = "QUOTE"
    DATA = "DATA"


STATUS_LABELS = {
    BookStatus.TO_READ: "Want to read",
    BookStatus.READING: "Reading",
    BookStatus.READ: "Read",
}

MEMO_LABELS = {
    MemoType.SUMMARY: "Summary",
    MemoType.QUOTE: "Quote",
    MemoType.DATA: "Data",
}

# Folder theme colours; the first one is the default
FOLDER_COLORS = (
    "#8B5CF6",  # Purple
    "#EC4899",  # Pink
    "#3B82F6",  # Blue
    "#10B981",  # Emerald
    "#F59E0B",  # Amber
    "#EF4444",  # Red
    "#6366F1",  # Indigo
)
DEFAULT_FOLDER_COLOR = FOLDER_COLORS[0]

# Drop target meaning "no folder"
ROOT_TARGET = "root"
