"""
Query construction shared by every collection-level operation.

A query transform is any callable taking a CollectionReference and returning a
Query, e.g.::

    from google.cloud.firestore_v1.base_query import FieldFilter

    lambda ref: ref.where(filter=FieldFilter("status", "==", "active"))
                   .order_by("created_at")
"""


def build_query(db, collection_path, query_transform=None, limit=None):
    """
    Build a Firestore query for a collection.

    Args:
        db: Firestore client
        collection_path: str, e.g. "users" or "users/u1/orders"
        query_transform: optional callable(CollectionReference) -> Query
        limit: optional int row cap, applied after the transform

    Returns:
        CollectionReference or Query
    """
    query = db.collection(collection_path)

    if query_transform is not None:
        query = query_transform(query)

    if limit is not None:
        query = query.limit(limit)

    return query
