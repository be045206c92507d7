"""
Pytest configuration and shared fixtures.
"""

import pytest
import tempfile
import os
from unittest.mock import Mock
from memsync.models import ObservationRecord
from memsync.session_store import SessionStore


@pytest.fixture
def temp_db_file():
    """Create a temporary database file for testing."""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # Cleanup
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def session_store(temp_db_file):
    """Session store backed by a temporary database."""
    return SessionStore(temp_db_file)


@pytest.fixture
def sample_observation():
    """Observation payload as the capture hooks produce it."""
    return {
        "type": "discovery",
        "title": "Auth tokens are cached in Redis",
        "subtitle": "Session middleware",
        "narrative": "The session middleware stores signed tokens in Redis with a one hour TTL.",
        "facts": ["Tokens expire after one hour", "Redis key prefix is sess:"],
        "concepts": ["caching", "auth"],
        "files_read": ["src/middleware/session.py"],
        "files_modified": [],
    }


@pytest.fixture
def seeded_store(session_store, sample_observation):
    """Store holding three observations with ids 1, 2 and 3."""
    for offset in range(3):
        session_store.store_observation(
            "session-abc",
            "benchmark",
            {**sample_observation, "title": f"Observation {offset + 1}"},
            prompt_number=offset + 1,
            discovery_tokens=100 * (offset + 1),
            created_at_epoch=1_700_000_000_000 + offset * 1000,
        )
    return session_store


@pytest.fixture
def raw_record():
    """Raw record with collection fields still structured."""
    return ObservationRecord(
        id=7,
        memory_session_id="session-abc",
        project="benchmark",
        type="feature",
        title="Added retry to uploader",
        subtitle=None,
        narrative="Uploads now retry three times with backoff.",
        text="legacy rendered text",
        facts=["a", "b"],
        concepts=["retry"],
        files_read=None,
        files_modified=["uploader.py"],
        prompt_number=None,
        discovery_tokens=None,
        created_at="2023-11-14T22:13:20+00:00",
        created_at_epoch=1_700_000_000_000,
    )


@pytest.fixture
def mock_indexer():
    """Indexer that reports every submitted observation as embedded."""
    indexer = Mock()
    indexer.sync_stored_observations.side_effect = lambda observations: len(observations)
    return indexer


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
