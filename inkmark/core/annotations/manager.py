"""
Annotation model: the single owner of a document's annotation collection.
"""
import logging
from typing import Callable, List, Optional, Tuple

from inkmark.core.errors import InvalidPageError
from .hit_testing import EraseRegion, intersects
from .models import Annotation, AnnotationSnapshot, AnnotationType

logger = logging.getLogger(__name__)


class AnnotationManager:
    """Manages all annotations for the loaded document."""

    def __init__(self):
        self._annotations: List[Annotation] = []
        self.document_name: Optional[str] = None
        self.page_count: int = 0
        self.has_unsaved_changes: bool = False

    def set_document(self, document_name: str, page_count: int) -> None:
        """
        Reset the model for a newly loaded document.

        Args:
            document_name: File name of the document
            page_count: Number of pages, bounds every annotation's page
        """
        self.clear_all()
        self.document_name = document_name
        self.page_count = page_count

    @property
    def annotations(self) -> Tuple[Annotation, ...]:
        """All annotations in insertion (paint) order."""
        return tuple(self._annotations)

    def is_valid_page(self, page: int) -> bool:
        return 1 <= page <= self.page_count

    def add_annotation(self, annotation: Annotation) -> None:
        """
        Append a committed annotation.

        Args:
            annotation: Annotation to add

        Raises:
            InvalidPageError: If the page is outside the loaded document
            ValueError: If an eraser drag is passed in
        """
        if annotation.annotation_type == AnnotationType.ERASER:
            raise ValueError("Eraser regions are never stored")
        if not self.is_valid_page(annotation.page):
            raise InvalidPageError(annotation.page, self.page_count)

        self._annotations.append(annotation)
        self.has_unsaved_changes = True
        logger.debug("Added %s annotation on page %d",
                     annotation.annotation_type.value, annotation.page)

    def remove_where(self, predicate: Callable[[Annotation], bool]) -> List[Annotation]:
        """
        Remove every annotation matching ``predicate`` in one update.

        Args:
            predicate: Returns True for annotations to drop

        Returns:
            The removed annotations, in collection order
        """
        kept, removed = [], []
        for ann in self._annotations:
            (removed if predicate(ann) else kept).append(ann)

        if removed:
            self._annotations = kept
            self.has_unsaved_changes = True
            logger.debug("Removed %d annotation(s)", len(removed))
        return removed

    def erase(self, region: EraseRegion, page: int) -> List[Annotation]:
        """Remove the annotations on ``page`` hit by the eraser region."""
        return self.remove_where(
            lambda ann: ann.page == page and intersects(ann, region)
        )

    def get_annotations_for_page(self, page: int) -> List[Annotation]:
        """
        Get all annotations for a specific page.

        Args:
            page: 1-based page number

        Returns:
            List of annotations on the specified page
        """
        return [ann for ann in self._annotations if ann.page == page]

    def get_annotation_count(self) -> int:
        """Get total number of annotations."""
        return len(self._annotations)

    def clear_all(self) -> None:
        """Clear all annotations and reset state."""
        self._annotations = []
        self.document_name = None
        self.page_count = 0
        self.has_unsaved_changes = False

    def mark_saved(self) -> None:
        """Mark all changes as saved."""
        self.has_unsaved_changes = False

    def serialize_snapshot(self) -> AnnotationSnapshot:
        """Capture the current annotations as a detached, serializable value."""
        return AnnotationSnapshot(
            document_name=self.document_name or "",
            annotations=list(self._annotations),
        )

    def load_snapshot(self, snapshot: AnnotationSnapshot) -> int:
        """
        Replace the collection with a snapshot's annotations.

        Entries for pages outside the loaded document, and stray eraser drags,
        are dropped rather than failing the whole load.

        Args:
            snapshot: Previously serialized snapshot

        Returns:
            Number of annotations loaded
        """
        if snapshot.document_name and self.document_name and \
                snapshot.document_name != self.document_name:
            logger.warning("Snapshot is for a different document: %s",
                           snapshot.document_name)

        loaded = []
        for ann in snapshot.annotations:
            if ann.annotation_type == AnnotationType.ERASER:
                logger.warning("Dropping stored eraser region on page %d", ann.page)
                continue
            if not self.is_valid_page(ann.page):
                logger.warning("Dropping annotation on page %d, document has %d pages",
                               ann.page, self.page_count)
                continue
            loaded.append(ann)

        self._annotations = loaded
        self.has_unsaved_changes = False
        return len(loaded)
