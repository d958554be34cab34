"""
Real-time listeners over Firestore's on_snapshot.

Firestore calls snapshot callbacks on its own watch thread. SnapshotStream
turns those callbacks into a plain blocking iterator: one item per
notification, in delivery order, transformed on the consuming thread so that
a failing ``from_record`` raises in the caller.

Usage::

    with watch_document(db, "users/u1", User.from_record) as updates:
        for user in updates:
            render(user)     # None while the document doesn't exist

Streams never end on their own. Stop one with ``close()`` (or by leaving the
``with`` block); that calls the native ``Watch.unsubscribe()``. If the watch
dies inside Firestore (permission denied, an unrecoverable RPC error), the
next ``next()`` raises that error as a ``GoogleAPICallError`` and the stream
is closed.
"""

import logging
import queue

from google.api_core.exceptions import GoogleAPICallError, Unknown, from_grpc_error

from . import config
from .query_builder import build_query
from .records import deserialize, deserialize_all

logger = logging.getLogger("firecraft.watchers")

_CLOSED = object()


class _WatchFailed:
    def __init__(self, error):
        self.error = error


def _as_api_error(reason):
    if isinstance(reason, GoogleAPICallError):
        return reason
    return from_grpc_error(reason)


class SnapshotStream:
    """
    Iterator over on_snapshot notifications.

    Notifications are buffered without bound until consumed. A stream that is
    subscribed but no longer read must be ``close()``d, otherwise every
    snapshot list Firestore delivers stays in memory.

    Args:
        subscribe: callable(callback) -> Watch, e.g. ``query.on_snapshot``.
            Called lazily on the first ``next()``.
        transform: callable applied to each notification's snapshot list.
        description: label used in log lines.
        poll_interval: seconds between liveness checks of the watch while
            the consumer waits.
    """

    def __init__(self, subscribe, transform, description="snapshot stream",
                 poll_interval=None):
        self._subscribe = subscribe
        self._transform = transform
        self._description = description
        self._poll_interval = poll_interval or config.WATCH_POLL_SECONDS
        self._queue = queue.Queue()
        self._watch = None
        self._closed = False

    def _on_snapshot(self, snapshots, changes, read_time):
        self._queue.put(snapshots)

    def _on_rpc_done(self, reason):
        # Runs on the RPC thread when the listen stream terminates for good
        if self._closed:
            return
        error = _as_api_error(reason)
        logger.error(f"Listener failed ({self._description}): {error}")
        self._queue.put(_WatchFailed(error))

    def _ensure_subscribed(self):
        if self._watch is None:
            logger.debug(f"Subscribing: {self._description}")
            self._watch = self._subscribe(self._on_snapshot)
            rpc = getattr(self._watch, "_rpc", None)
            if rpc is not None:
                rpc.add_done_callback(self._on_rpc_done)

    def _watch_died(self):
        return self._watch is not None and getattr(self._watch, "is_active", True) is False

    def _next_item(self):
        while True:
            try:
                return self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                if self._watch_died():
                    return _WatchFailed(Unknown(f"Listener stopped ({self._description})"))

    @property
    def closed(self):
        return self._closed

    def __iter__(self):
        return self

    def __next__(self):
        if self._closed:
            raise StopIteration
        self._ensure_subscribed()
        item = self._next_item()
        if item is _CLOSED:
            raise StopIteration
        if isinstance(item, _WatchFailed):
            self.close()
            raise item.error
        return self._transform(item)

    def close(self):
        """Unsubscribe from Firestore and end iteration. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        if self._watch is not None:
            logger.debug(f"Unsubscribing: {self._description}")
            self._watch.unsubscribe()
            self._watch = None
        # Wake a consumer blocked in __next__
        self._queue.put(_CLOSED)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def _single(snapshots):
    # Document listeners deliver a one-element list
    return snapshots[0] if snapshots else None


def _document_value(snapshots, from_record):
    snapshot = _single(snapshots)
    if snapshot is None:
        return None
    return deserialize(snapshot, from_record)


def _field_value(snapshots, field_name):
    snapshot = _single(snapshots)
    if snapshot is None or not snapshot.exists:
        return None
    return (snapshot.to_dict() or {}).get(field_name)


def _count(snapshots, predicate):
    if predicate is None:
        return len(snapshots)
    return sum(1 for snap in snapshots if predicate(snap.to_dict() or {}))


# ──────────────────────────────────────────────
#  Document listeners
# ──────────────────────────────────────────────

def watch_document(db, document_path, from_record):
    """Stream of ``from_record(record)`` for one document, or None while it doesn't exist."""
    ref = db.document(document_path)
    return SnapshotStream(
        ref.on_snapshot,
        lambda snapshots: _document_value(snapshots, from_record),
        description=f"document {document_path}",
    )


def watch_document_field(db, document_path, field_name):
    """Stream of one raw field value; None when the document or the field is absent."""
    ref = db.document(document_path)
    return SnapshotStream(
        ref.on_snapshot,
        lambda snapshots: _field_value(snapshots, field_name),
        description=f"field {field_name} of {document_path}",
    )


# ──────────────────────────────────────────────
#  Query listeners
# ──────────────────────────────────────────────

def watch_snapshots(db, collection_path, query_transform=None):
    """Stream of the raw DocumentSnapshot lists Firestore delivers for the query."""
    query = build_query(db, collection_path, query_transform)
    return SnapshotStream(
        query.on_snapshot,
        list,
        description=f"snapshots of {collection_path}",
    )


def watch_collection(db, collection_path, from_record, query_transform=None):
    """
    Stream of the whole deserialized result set.

    Every notification re-deserializes every document; no diffing.
    """
    query = build_query(db, collection_path, query_transform)
    return SnapshotStream(
        query.on_snapshot,
        lambda snapshots: deserialize_all(snapshots, from_record),
        description=f"collection {collection_path}",
    )


def watch_document_count(db, collection_path, query_transform=None, predicate=None):
    """
    Stream of result-set sizes.

    Without ``predicate`` this is the size Firestore reports. With one, every
    document's data is materialized and tested locally on each change, which
    costs a full read of the result set per notification.
    """
    query = build_query(db, collection_path, query_transform)
    return SnapshotStream(
        query.on_snapshot,
        lambda snapshots: _count(snapshots, predicate),
        description=f"count of {collection_path}",
    )
