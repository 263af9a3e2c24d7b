"""
Pure helpers for the display order of bookmarks inside a group
"""
from typing import List, Sequence, Tuple, TypeVar

from ..models.bookmark import Bookmark
from ..utils.timestamp import EPOCH, parse_timestamp

T = TypeVar("T")


def display_sort_key(bookmark: Bookmark) -> Tuple[int, float]:
    """Positioned bookmarks first (ascending), then unpositioned ones newest first"""
    if bookmark.position is not None:
        return (0, float(bookmark.position))
    created = parse_timestamp(bookmark.created_at) or EPOCH
    return (1, -(created - EPOCH).total_seconds())


def sort_for_display(bookmarks: Sequence[Bookmark]) -> List[Bookmark]:
    return sorted(bookmarks, key=display_sort_key)


def splice(items: Sequence[T], item: T, target_position: int) -> List[T]:
    """Return a copy of ``items`` with ``item`` inserted at ``target_position``

    Positions past the end append.
    """
    if target_position < 0:
        raise ValueError("target_position must be >= 0")
    result = list(items)
    # clamp first: list.insert overflows on indexes beyond ssize_t
    result.insert(min(target_position, len(result)), item)
    return result


def dense_positions(bookmarks: Sequence[Bookmark]) -> List[Tuple[Bookmark, int]]:
    """Pair each bookmark with its zero-based index in the given order"""
    return [(bookmark, index) for index, bookmark in enumerate(bookmarks)]
