"""
Firecraft: simplified interface over a Firestore client.

One object per client handle. Reads take a ``from_record`` callable that turns
a document's data (with ``id`` merged in) into whatever the caller wants;
collection operations take an optional ``query_transform`` callable that
refines the CollectionReference into a Query.

Usage::

    from firecraft import Firecraft

    fc = Firecraft(db)
    users = fc.fetch_collection("users", User.from_record,
                                query_transform=lambda ref: ref.order_by("name"))

    page = fc.fetch_initial_page("users", User.from_record, limit=20)
    if page.has_more:
        page = fc.fetch_next_page("users", User.from_record, page.cursor, limit=20)

    with fc.watch_document("users/u1", User.from_record) as updates:
        for user in updates:
            ...

Firestore errors (google.api_core.exceptions) are logged and re-raised as is.
A missing document is None, not an error.
"""

import logging

from google.api_core.exceptions import GoogleAPICallError

from . import batch_updater, config, pagination, watchers
from .query_builder import build_query
from .records import deserialize, deserialize_all

logger = logging.getLogger("firecraft.core")


class Firecraft:
    """CRUD, listeners, pagination and batch updates over one Firestore client."""

    def __init__(self, db=None):
        """
        Args:
            db: google.cloud.firestore.Client. When omitted, one is created via
                firecraft.client.create_client() from the FIRECRAFT_* settings.
        """
        if db is None:
            from .client import create_client
            db = create_client()
        self.db = db

    # ──────────────────────────────────────────────
    #  One-shot reads
    # ──────────────────────────────────────────────

    def fetch_collection(self, collection_path, from_record, query_transform=None, limit=None):
        """Read a collection (or a transformed query over it) into a list."""
        query = build_query(self.db, collection_path, query_transform, limit)
        try:
            snapshots = query.get()
        except GoogleAPICallError as e:
            logger.error(f"fetch_collection failed ({collection_path}): {e}")
            raise
        return deserialize_all(snapshots, from_record)

    def fetch_document(self, document_path, from_record):
        """Read one document. Returns None if it doesn't exist."""
        try:
            snapshot = self.db.document(document_path).get()
        except GoogleAPICallError as e:
            logger.error(f"fetch_document failed ({document_path}): {e}")
            raise
        return deserialize(snapshot, from_record)

    def count_documents(self, collection_path, query_transform=None):
        """Server-side count aggregation; documents are not downloaded."""
        query = build_query(self.db, collection_path, query_transform)
        try:
            results = query.count(alias="total").get()
        except GoogleAPICallError as e:
            logger.error(f"count_documents failed ({collection_path}): {e}")
            raise
        for result in results:
            for aggregation in result:
                return int(aggregation.value)
        return 0

    # ──────────────────────────────────────────────
    #  Writes
    # ──────────────────────────────────────────────

    def add_document(self, collection_path, data):
        """Add a document with an auto-generated id. Returns its DocumentReference."""
        try:
            _, ref = self.db.collection(collection_path).add(data)
        except GoogleAPICallError as e:
            logger.error(f"add_document failed ({collection_path}): {e}")
            raise
        logger.debug(f"Added {collection_path}/{ref.id}")
        return ref

    def set_document(self, collection_path, doc_id, data=None, merge=False):
        """Create or overwrite ``collection_path/doc_id``; ``merge=True`` keeps unlisted fields."""
        try:
            self.db.collection(collection_path).document(doc_id).set(data or {}, merge=merge)
        except GoogleAPICallError as e:
            logger.error(f"set_document failed ({collection_path}/{doc_id}): {e}")
            raise

    def update_document(self, document_path, data):
        """Update fields of an existing document. Firestore raises NotFound if it's missing."""
        try:
            self.db.document(document_path).update(data)
        except GoogleAPICallError as e:
            logger.error(f"update_document failed ({document_path}): {e}")
            raise

    def delete_document(self, document_path):
        try:
            self.db.document(document_path).delete()
        except GoogleAPICallError as e:
            logger.error(f"delete_document failed ({document_path}): {e}")
            raise

    # ──────────────────────────────────────────────
    #  Listeners
    # ──────────────────────────────────────────────

    def watch_document(self, document_path, from_record):
        return watchers.watch_document(self.db, document_path, from_record)

    def watch_document_field(self, document_path, field_name):
        return watchers.watch_document_field(self.db, document_path, field_name)

    def watch_snapshots(self, collection_path, query_transform=None):
        return watchers.watch_snapshots(self.db, collection_path, query_transform)

    def watch_collection(self, collection_path, from_record, query_transform=None):
        return watchers.watch_collection(self.db, collection_path, from_record, query_transform)

    def watch_document_count(self, collection_path, query_transform=None, predicate=None):
        """
        Live count of documents.

        A ``predicate`` forces every document to be read and tested on every
        change; prefer expressing the filter in ``query_transform`` when possible.
        """
        return watchers.watch_document_count(self.db, collection_path, query_transform, predicate)

    # ──────────────────────────────────────────────
    #  Pagination
    # ──────────────────────────────────────────────

    def fetch_initial_page(self, collection_path, from_record, query_transform=None,
                           limit=config.DEFAULT_PAGE_SIZE):
        return pagination.fetch_page(
            self.db, collection_path, from_record, query_transform, None, limit
        )

    def fetch_next_page(self, collection_path, from_record, cursor, query_transform=None,
                        limit=config.DEFAULT_PAGE_SIZE):
        """Fetch the page after ``cursor`` (the previous page's ``cursor``)."""
        return pagination.fetch_page(
            self.db, collection_path, from_record, query_transform, cursor, limit
        )

    def watch_paginated_collection(self, collection_path, from_record, query_transform=None,
                                   cursor=None, limit=config.DEFAULT_PAGE_SIZE):
        return pagination.stream_pages(
            self.db, collection_path, from_record, query_transform, cursor, limit
        )

    def iter_pages(self, collection_path, from_record, query_transform=None,
                   limit=config.DEFAULT_PAGE_SIZE):
        return pagination.iter_pages(
            self.db, collection_path, from_record, query_transform, limit
        )

    # ──────────────────────────────────────────────
    #  Batch updates
    # ──────────────────────────────────────────────

    def update_where_field(self, collection_path, field_name, new_value, predicate,
                           query_transform=None, batch_size=config.DEFAULT_BATCH_SIZE):
        """
        Set one field on every document matching ``predicate``.

        Not atomic across batches: a failure part-way leaves earlier batches
        applied and raises without a count. See firecraft.batch_updater.
        """
        return batch_updater.update_where(
            self.db, collection_path, field_name, new_value, predicate,
            query_transform, batch_size,
        )

    def __repr__(self):
        return f"Firecraft({self.db!r})"
