"""
Pytest Configuration and Shared Fixtures
"""
import pytest
from unittest.mock import Mock
import sys
import os

# Package root and tests/ (for fake_firestore) on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fake_firestore import FakeFirestore


# ============================================================
# MOCK FIRESTORE
# ============================================================

@pytest.fixture
def mock_db():
    """Create a mock Firestore database"""
    db = Mock()
    return db


@pytest.fixture
def mock_firestore_doc():
    """Create a mock Firestore document snapshot"""
    def _create(doc_id, data, exists=True):
        doc = Mock()
        doc.id = doc_id
        doc.exists = exists
        doc.to_dict.return_value = dict(data) if exists else None
        doc.reference = Mock(name=f"ref_{doc_id}")
        return doc
    return _create


# ============================================================
# IN-MEMORY FIRESTORE
# ============================================================

def _users(count):
    return {
        f"u{i:03d}": {"name": f"user {i}", "rank": i, "active": i % 2 == 0}
        for i in range(count)
    }


@pytest.fixture
def fake_db():
    """Empty in-memory Firestore"""
    return FakeFirestore()


@pytest.fixture
def make_fake_db():
    """Build an in-memory Firestore with `count` users (ids u000, u001, ...)"""
    def _create(count, collection="users"):
        return FakeFirestore({collection: _users(count)})
    return _create


# ============================================================
# TEST HELPERS
# ============================================================

class User:
    def __init__(self, id, name, rank=None, active=None):
        self.id = id
        self.name = name
        self.rank = rank
        self.active = active

    @classmethod
    def from_record(cls, record):
        return cls(record["id"], record["name"], record.get("rank"), record.get("active"))

    def __repr__(self):
        return f"User({self.id!r})"


@pytest.fixture
def user_cls():
    return User


# ============================================================
# PYTEST CONFIGURATION
# ============================================================

def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
