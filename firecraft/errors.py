"""
Backing-store error types.

Firecraft defines no errors of its own. Everything a call can fail with is a
google.api_core error raised by the Firestore client and passed through
unchanged; these aliases let callers write ``except BackingStoreError``
without importing google.api_core themselves.
"""

from google.api_core.exceptions import (
    AlreadyExists,
    DeadlineExceeded,
    GoogleAPICallError,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    ResourceExhausted,
    ServiceUnavailable,
)

BackingStoreError = GoogleAPICallError

__all__ = [
    "BackingStoreError",
    "AlreadyExists",
    "DeadlineExceeded",
    "InvalidArgument",
    "NotFound",
    "PermissionDenied",
    "ResourceExhausted",
    "ServiceUnavailable",
]
