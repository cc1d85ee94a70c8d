"""
Handles persistence of annotation snapshots to/from JSON files.
"""
import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from inkmark.utils.resource_loader import get_annotations_dir
from .models import AnnotationSnapshot

logger = logging.getLogger(__name__)


class AnnotationPersistence:
    """Manages saving and loading snapshots to/from disk."""

    def __init__(self, storage_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            storage_dir: Directory for snapshot files, defaults to the app data dir
        """
        self._storage_dir: Optional[Path] = Path(storage_dir) if storage_dir else None

    def get_storage_dir(self) -> Path:
        """Get or create the directory holding snapshot files."""
        if self._storage_dir is None:
            self._storage_dir = get_annotations_dir()
        self._storage_dir.mkdir(parents=True, exist_ok=True)
        return self._storage_dir

    def get_json_path(self, document_name: str) -> Path:
        """
        Get the JSON file path for a given document.

        Args:
            document_name: Name of the PDF document

        Returns:
            Path to the corresponding JSON snapshot file
        """
        # Hash the name so any file name maps to a safe, unique file
        name_hash = hashlib.md5(document_name.encode()).hexdigest()
        return self.get_storage_dir() / f"{name_hash}.json"

    def save_snapshot(self, snapshot: AnnotationSnapshot) -> bool:
        """
        Save a snapshot to its JSON file.

        Args:
            snapshot: Snapshot to save

        Returns:
            True if save was successful, False otherwise
        """
        file_path = self.get_json_path(snapshot.document_name)
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            return True
        except (OSError, TypeError) as e:
            logger.warning("Failed to save annotations to %s: %s", file_path, e)
            return False

    def load_snapshot(self, document_name: str) -> Optional[AnnotationSnapshot]:
        """
        Load the stored snapshot for a document.

        Args:
            document_name: Name of the PDF document

        Returns:
            The snapshot, or None if nothing usable is stored
        """
        file_path = self.get_json_path(document_name)
        if not file_path.exists():
            return None

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load annotations from %s: %s", file_path, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed snapshot file %s", file_path)
            return None

        skipped = []
        snapshot = AnnotationSnapshot.from_dict(data, skipped)
        if skipped:
            logger.warning("Skipped %d unreadable annotation(s) in %s",
                           len(skipped), file_path)
        return snapshot

    def has_saved_snapshot(self, document_name: str) -> bool:
        """Check if a snapshot exists for a document."""
        return self.get_json_path(document_name).exists()

    def delete_snapshot(self, document_name: str) -> bool:
        """
        Delete the stored snapshot for a document.

        Returns:
            True if deletion was successful or the file didn't exist
        """
        file_path = self.get_json_path(document_name)
        if not file_path.exists():
            return True

        try:
            os.remove(file_path)
            return True
        except OSError as e:
            logger.warning("Failed to delete %s: %s", file_path, e)
            return False
