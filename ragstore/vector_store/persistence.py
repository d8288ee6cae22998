"""
JSON snapshot persistence for the document store.

The whole collection is stored as one JSON array under
``<directory>/<store_id>.json``; every save rewrites the full snapshot.
"""

from __future__ import annotations

import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ragstore.errors import PersistenceError
from ragstore.vector_store.base import Document

logger = logging.getLogger(__name__)


class DocumentRecord(BaseModel):
    """On-disk shape of one document."""

    model_config = ConfigDict(extra="ignore")

    id: str
    text: str
    embedding: List[float]
    metadata: Optional[Dict[str, Any]] = None


_RECORDS = TypeAdapter(List[DocumentRecord])


def _to_document(record: DocumentRecord) -> Document:
    return Document(
        id=record.id,
        text=record.text,
        embedding=tuple(record.embedding),
        metadata=record.metadata,
    )


def _to_record(doc: Document) -> DocumentRecord:
    return DocumentRecord(
        id=doc.id,
        text=doc.text,
        embedding=list(doc.embedding),
        metadata=doc.metadata,
    )


def _check_integrity(documents: Sequence[Document], path: Path) -> None:
    seen: set[str] = set()
    dimension: int | None = None
    for position, doc in enumerate(documents):
        if doc.id in seen:
            raise PersistenceError(f"Duplicate document id {doc.id!r} in {path}")
        seen.add(doc.id)
        if not doc.text:
            raise PersistenceError(f"Document {doc.id!r} in {path} has empty text")
        if not doc.embedding:
            raise PersistenceError(f"Document {doc.id!r} in {path} has an empty embedding")
        if not all(math.isfinite(x) for x in doc.embedding):
            raise PersistenceError(f"Document {doc.id!r} in {path} has non-finite embedding values")
        if dimension is None:
            dimension = doc.dimension
        elif doc.dimension != dimension:
            raise PersistenceError(
                f"Embedding dimension mismatch in {path} at position {position}: "
                f"{doc.dimension} != {dimension}"
            )


class JsonFileStorage:
    def __init__(self, directory: str | os.PathLike[str], store_id: str) -> None:
        if not store_id:
            raise ValueError("store_id must not be empty")
        self.directory = Path(directory)
        self.store_id = store_id

    @property
    def path(self) -> Path:
        return self.directory / f"{self.store_id}.json"

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> List[Document]:
        """
        Load the persisted collection.

        A missing file is an empty collection. Anything unreadable or
        malformed raises PersistenceError instead of starting empty.
        """
        path = self.path
        if not path.exists():
            logger.info("No persisted snapshot found", extra={"path": str(path)})
            return []

        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise PersistenceError(f"Cannot read {path}: {exc}") from exc

        try:
            records = _RECORDS.validate_json(raw)
        except PydanticValidationError as exc:
            raise PersistenceError(f"Malformed snapshot {path}: {exc}") from exc

        documents = [_to_document(r) for r in records]
        _check_integrity(documents, path)
        logger.info("Loaded snapshot", extra={"path": str(path), "count": len(documents)})
        return documents

    def save(self, documents: Sequence[Document]) -> None:
        """
        Replace the persisted collection with ``documents``.

        The snapshot goes to a temporary file that is renamed over the target,
        so a failed write leaves the previous snapshot intact.
        """
        path = self.path
        payload = _RECORDS.dump_json([_to_record(d) for d in documents], indent=2)

        tmp_name: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{self.store_id}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceError(f"Cannot write {path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temporary snapshot", extra={"path": tmp_name})

        logger.info("Saved snapshot", extra={"path": str(path), "count": len(documents)})


__all__ = ["DocumentRecord", "JsonFileStorage"]
