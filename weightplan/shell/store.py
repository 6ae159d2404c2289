"""Firestore Store - Persistence for the application snapshot.

This module handles all database I/O. The whole state lives in one document
under a fixed key; there are no partial reads or writes.
All I/O is contained here; business logic is in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

from google.cloud import firestore
from pydantic import ValidationError

from ..core.models import Snapshot


logger = logging.getLogger(__name__)

STATE_KEY = "mainState"


@dataclass
class FirestoreConfig:
    """Configuration for the snapshot store.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        collection: Collection holding the snapshot document
        state_key: Document ID of the snapshot
    """

    project_id: str | None = None
    database: str | None = None
    collection: str = "appState"
    state_key: str = STATE_KEY


class SnapshotFirestoreStore:
    """Loads, saves and clears the single state snapshot.

    Document structure:
        {collection}/{state_key}: { profile, dailyLogs, customOptions,
                                    customActivities, language }

    Failures are logged and reported through the return value; nothing
    raises to the caller.
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize the store.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _state_ref(self) -> firestore.DocumentReference:
        """Get reference to the snapshot document."""
        return self.client.collection(self.config.collection).document(self.config.state_key)

    def load(self) -> Snapshot | None:
        """Fetch the stored snapshot.

        Returns:
            Snapshot if found and readable, None otherwise
        """
        logger.debug("Loading snapshot %s", self.config.state_key)
        try:
            doc = self._state_ref().get()
            if not doc.exists:
                return None
            return Snapshot.model_validate(doc.to_dict())
        except ValidationError as e:
            logger.error("Stored snapshot is malformed: %s", str(e))
            return None
        except Exception as e:
            logger.error("Failed to load snapshot: %s", str(e))
            return None

    def save(self, snapshot: Snapshot) -> bool:
        """Replace the stored snapshot.

        Args:
            snapshot: State to persist

        Returns:
            True if successful
        """
        logger.debug("Saving snapshot %s", self.config.state_key)
        try:
            data = snapshot.model_dump(mode="json", by_alias=True)
            self._state_ref().set(data)
            return True
        except Exception as e:
            logger.error("Failed to save snapshot: %s", str(e))
            return False

    def clear(self) -> bool:
        """Delete the stored snapshot.

        Returns:
            True if successful
        """
        logger.info("Clearing snapshot %s", self.config.state_key)
        try:
            self._state_ref().delete()
            return True
        except Exception as e:
            logger.error("Failed to clear snapshot: %s", str(e))
            return False
