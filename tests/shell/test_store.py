"""Unit tests for the Firestore snapshot store using a mocked client."""

from unittest.mock import MagicMock, patch

import pytest

from weightplan.core.models import Profile, Snapshot
from weightplan.shell.store import FirestoreConfig, SnapshotFirestoreStore


@pytest.fixture
def mock_firestore():
    """Mock Firestore client for testing."""
    with patch("weightplan.shell.store.firestore") as mock_fs:
        mock_client = MagicMock()
        mock_fs.Client.return_value = mock_client
        yield mock_fs


@pytest.fixture
def mock_doc(mock_firestore):
    """The snapshot document reference."""
    doc_ref = MagicMock()
    mock_firestore.Client.return_value.collection.return_value.document.return_value = doc_ref
    return doc_ref


class TestClientSetup:
    """Tests for lazy client creation."""

    def test_passes_project_and_database(self, mock_firestore):
        """Configured project and database reach the client."""
        store = SnapshotFirestoreStore(FirestoreConfig(project_id="proj", database="db"))
        store.client

        mock_firestore.Client.assert_called_once_with(project="proj", database="db")

    def test_uses_fixed_key(self, mock_firestore, mock_doc):
        """The snapshot lives under the configured collection and key."""
        store = SnapshotFirestoreStore()
        mock_doc.get.return_value.exists = False
        store.load()

        client = mock_firestore.Client.return_value
        client.collection.assert_called_with("appState")
        client.collection.return_value.document.assert_called_with("mainState")


class TestLoad:
    """Tests for load."""

    def test_missing_document(self, mock_doc):
        """No stored document means no data yet."""
        mock_doc.get.return_value.exists = False
        assert SnapshotFirestoreStore().load() is None

    def test_existing_document(self, mock_doc):
        """A stored document is parsed into a Snapshot."""
        stored = Snapshot(profile=Profile(start_weight=90)).model_dump(mode="json", by_alias=True)
        mock_doc.get.return_value.exists = True
        mock_doc.get.return_value.to_dict.return_value = stored

        snapshot = SnapshotFirestoreStore().load()
        assert snapshot.profile.start_weight == 90

    def test_malformed_document(self, mock_doc):
        """A document of the wrong shape reads as no data."""
        mock_doc.get.return_value.exists = True
        mock_doc.get.return_value.to_dict.return_value = {"profile": {"height": "tall"}}

        assert SnapshotFirestoreStore().load() is None

    def test_read_failure(self, mock_doc):
        """Read errors are swallowed."""
        mock_doc.get.side_effect = RuntimeError("unavailable")
        assert SnapshotFirestoreStore().load() is None


class TestSaveAndClear:
    """Tests for save and clear."""

    def test_save_writes_whole_snapshot(self, mock_doc):
        """The full snapshot is written with camelCase keys."""
        assert SnapshotFirestoreStore().save(Snapshot()) is True

        data = mock_doc.set.call_args[0][0]
        assert "dailyLogs" in data
        assert data["profile"]["dailyBudget"] == 1800

    def test_save_failure(self, mock_doc):
        """Write errors return False instead of raising."""
        mock_doc.set.side_effect = RuntimeError("unavailable")
        assert SnapshotFirestoreStore().save(Snapshot()) is False

    def test_clear(self, mock_doc):
        """Clearing deletes the document."""
        assert SnapshotFirestoreStore().clear() is True
        mock_doc.delete.assert_called_once()

    def test_clear_failure(self, mock_doc):
        """Delete errors return False."""
        mock_doc.delete.side_effect = RuntimeError("unavailable")
        assert SnapshotFirestoreStore().clear() is False
