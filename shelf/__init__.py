"""Book shelf with insight memos: entity store, derived views and mutations."""
from .constants import BookStatus, MemoType, MemoFilter, ROOT_TARGET
from .store import EntityStore
from .views import ListingFilter, ListingView, build_listing, build_memo_list
from .notifications import Notifier
from .mutations import MutationCoordinator, MutationResult, MutationState

__all__ = [
    'BookStatus',
    'MemoType',
    'MemoFilter',
    'ROOT_TARGET',
    'EntityStore',
    'ListingFilter',
    'ListingView',
    'build_listing',
    'build_memo_list',
    'Notifier',
    'MutationCoordinator',
    'MutationResult',
    'MutationState',
]
