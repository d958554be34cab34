"""
Snapshot → record conversion.

A record is the document's field mapping with the document id merged in under
``id``. The document id always wins over an ``id`` field stored in the payload.
"""

ID_FIELD = "id"


def to_record(snapshot):
    """Return the snapshot's data with ``id`` set to the document id, or None if missing."""
    if not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    data[ID_FIELD] = snapshot.id
    return data


def deserialize(snapshot, from_record):
    """Run ``from_record`` over the snapshot's record; None when the document doesn't exist."""
    record = to_record(snapshot)
    if record is None:
        return None
    return from_record(record)


def deserialize_all(snapshots, from_record):
    return [from_record(to_record(snap)) for snap in snapshots]
