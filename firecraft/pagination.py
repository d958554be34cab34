"""
Cursor-based pagination over Firestore queries.

Every page query asks for ``limit + 1`` documents. The extra document only
tells us whether another page exists; it is never returned and never becomes
the cursor.

Usage::

    page = fetch_page(db, "users", User.from_record, limit=20)
    while page.has_more:
        page = fetch_page(db, "users", User.from_record,
                          cursor=page.cursor, limit=20)

Note: ``limit`` is not validated. ``limit=0`` gives an empty page whose
``has_more`` says whether the query matches anything; a negative limit is
rejected by Firestore (InvalidArgument).
"""

import logging
from dataclasses import dataclass, field

from google.api_core.exceptions import GoogleAPICallError

from . import config
from .query_builder import build_query
from .records import deserialize_all
from .watchers import SnapshotStream

logger = logging.getLogger("firecraft.pagination")


@dataclass
class PaginatedResult:
    """One page of deserialized documents."""
    items: list = field(default_factory=list)
    cursor: object = None          # DocumentSnapshot of the last item; None when items is empty
    has_more: bool = False         # Firestore returned more than `limit` documents


def page_query(db, collection_path, query_transform=None, cursor=None, limit=config.DEFAULT_PAGE_SIZE):
    """Build the over-fetch query: transform, then start_after(cursor), then limit + 1."""
    query = build_query(db, collection_path, query_transform)
    if cursor is not None:
        query = query.start_after(cursor)
    return query.limit(limit + 1)


def build_page(snapshots, from_record, limit):
    """
    Shape an over-fetched result set into a PaginatedResult.

    Args:
        snapshots: DocumentSnapshots from a ``limit + 1`` query, in query order
        from_record: callable(dict) -> item
        limit: page size

    Returns:
        PaginatedResult
    """
    snapshots = list(snapshots)
    has_more = len(snapshots) > limit
    kept = snapshots[:limit] if limit > 0 else []

    return PaginatedResult(
        items=deserialize_all(kept, from_record),
        cursor=kept[-1] if kept else None,
        has_more=has_more,
    )


def fetch_page(db, collection_path, from_record, query_transform=None,
               cursor=None, limit=config.DEFAULT_PAGE_SIZE):
    """
    Fetch one page.

    Pass ``cursor=None`` for the first page and the previous page's
    ``cursor`` for the following ones.
    """
    query = page_query(db, collection_path, query_transform, cursor, limit)
    try:
        snapshots = query.get()
    except GoogleAPICallError as e:
        logger.error(f"Page fetch failed ({collection_path}): {e}")
        raise

    page = build_page(snapshots, from_record, limit)
    logger.debug(
        f"Fetched page of {collection_path}: {len(page.items)} items, has_more={page.has_more}"
    )
    return page


def stream_pages(db, collection_path, from_record, query_transform=None,
                 cursor=None, limit=config.DEFAULT_PAGE_SIZE):
    """
    Live version of fetch_page.

    Returns a SnapshotStream that yields a fresh PaginatedResult each time the
    page's result set changes. The window stays anchored at ``cursor``.
    """
    query = page_query(db, collection_path, query_transform, cursor, limit)
    return SnapshotStream(
        query.on_snapshot,
        lambda snapshots: build_page(snapshots, from_record, limit),
        description=f"pages of {collection_path}",
    )


def iter_pages(db, collection_path, from_record, query_transform=None,
               limit=config.DEFAULT_PAGE_SIZE):
    """
    Yield every page from the start of the query until ``has_more`` is False.

    One round trip per page; only the current page is held in memory.
    """
    cursor = None
    while True:
        page = fetch_page(db, collection_path, from_record, query_transform, cursor, limit)
        yield page
        # cursor is None when limit <= 0; stop instead of refetching page one forever
        if not page.has_more or page.cursor is None:
            return
        cursor = page.cursor
