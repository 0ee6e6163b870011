"""JSON file storage backend.

The whole document is rewritten on every write. The file is written to a temporary sibling
first and moved into place so a crash never leaves a half-written document behind.
"""

import json
import logging
import os
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from taskflow.storage.document import DocumentStorage, StorageDocument, empty_document

logger = logging.getLogger(__name__)


class JsonFileStorage(DocumentStorage):
    """DocumentStorage persisted to a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._save(empty_document())
            logger.info(f"Created task data file at {self.path}")

    def _load(self) -> StorageDocument:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return StorageDocument.model_validate(json.load(f))
        except FileNotFoundError:
            return empty_document()
        except (OSError, ValueError, ValidationError) as e:
            # Unreadable or malformed data starts over from an empty document
            logger.error(f"Failed to read task data from {self.path}: {type(e).__name__}: {str(e)}")
            return empty_document()

    def _save(self, doc: StorageDocument) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(doc.model_dump_json(by_alias=True, indent=2))
        os.replace(tmp_path, self.path)
