"""
firecraft - simplified Firestore access
=======================================

Modules:
- core: Firecraft facade (CRUD, listeners, pagination, batch updates)
- query_builder: collection path + transform + limit -> Query
- records: snapshot -> record with ``id`` merged in
- pagination: over-fetch-by-one pages with snapshot cursors
- watchers: on_snapshot listeners as blocking iterators
- batch_updater: predicate-filtered field updates in WriteBatches
- client: firebase_admin / Firestore client bootstrap
- config: environment settings
- errors: aliases for the Firestore (google.api_core) errors callers may see

Usage:
    from firecraft import Firecraft
    fc = Firecraft(db)
    page = fc.fetch_initial_page("users", User.from_record, limit=20)
"""

__version__ = "0.1.0"

from .core import Firecraft
from .errors import BackingStoreError
from .pagination import PaginatedResult
from .watchers import SnapshotStream

__all__ = [
    "Firecraft",
    "PaginatedResult",
    "SnapshotStream",
    "BackingStoreError",
    "__version__",
]
