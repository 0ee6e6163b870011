"""In-memory storage backend (tests and the resilient mirror)."""

import logging

from taskflow.storage.document import DocumentStorage, StorageDocument, empty_document

logger = logging.getLogger(__name__)


class InMemoryStorage(DocumentStorage):
    """DocumentStorage kept entirely in process memory."""

    def __init__(self, document: StorageDocument = None):
        super().__init__()
        self._doc = document if document is not None else empty_document()

    def _load(self) -> StorageDocument:
        return self._doc

    def _save(self, doc: StorageDocument) -> None:
        self._doc = doc

    def snapshot(self) -> StorageDocument:
        """Deep copy of the current document."""
        with self._lock:
            return self._doc.model_copy(deep=True)

    def replace_document(self, doc: StorageDocument) -> None:
        """Swap in a whole document as-is, without stamping timestamps."""
        with self._lock:
            self._doc = doc
