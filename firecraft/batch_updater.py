"""
Conditional field updates committed in WriteBatches.

The whole query result is read into memory, filtered locally with a predicate
(anything Firestore can't express as a query), and the matches are written in
batches of at most ``batch_size`` updates.

Batches commit one after another and are not rolled back. If batch k fails,
batches 1..k-1 stay applied, nothing from batch k on is written, and the
Firestore error propagates without a count. The "Committed batch" info logs
are the only record of how far a failed run got.
"""

import logging

from google.api_core.exceptions import GoogleAPICallError

from . import config
from .query_builder import build_query

logger = logging.getLogger("firecraft.batch_updater")


def chunked(items, size):
    """Split ``items`` into consecutive lists of at most ``size`` elements."""
    return [items[i:i + size] for i in range(0, len(items), size)]


def update_where(db, collection_path, field_name, new_value, predicate,
                 query_transform=None, batch_size=config.DEFAULT_BATCH_SIZE):
    """
    Set ``field_name`` to ``new_value`` on every document matching ``predicate``.

    Args:
        db: Firestore client
        collection_path: str
        field_name: field to set (dotted paths update nested fields)
        new_value: value to write
        predicate: callable(dict) -> bool, called with each document's data
        query_transform: optional callable(CollectionReference) -> Query,
            narrows what gets read before the predicate runs
        batch_size: updates per WriteBatch. Firestore rejects more than
            500 at commit time; not checked here.

    Returns:
        int, number of documents updated
    """
    query = build_query(db, collection_path, query_transform)
    try:
        snapshots = query.get()
    except GoogleAPICallError as e:
        logger.error(f"update_where read failed ({collection_path}): {e}")
        raise

    matches = [snap for snap in snapshots if predicate(snap.to_dict() or {})]
    batches = chunked(matches, batch_size)
    logger.debug(
        f"update_where {collection_path}.{field_name}: {len(matches)} matches, {len(batches)} batches"
    )

    updated = 0
    for index, chunk in enumerate(batches, start=1):
        batch = db.batch()
        for snap in chunk:
            batch.update(snap.reference, {field_name: new_value})
        try:
            batch.commit()
        except GoogleAPICallError as e:
            logger.error(
                f"update_where batch {index}/{len(batches)} failed on {collection_path} "
                f"after {updated} documents were committed: {e}"
            )
            raise
        updated += len(chunk)
        logger.info(
            f"Committed batch {index}/{len(batches)} on {collection_path} ({updated}/{len(matches)})"
        )

    return updated
