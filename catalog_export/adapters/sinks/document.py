"""
Document Sink Adapters

Collection-like destinations for the "mongo" output type. Both accept one
document per record through insert_one(), the same call a document-store
collection exposes.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union


@dataclass
class InsertOneResult:
    """Result of a single document insert"""
    inserted_id: Any
    acknowledged: bool = True


class InMemoryDocumentSink:
    """Keeps inserted documents in a list"""

    def __init__(self, name: str = "records"):
        self.name = name
        self.documents: List[Dict[str, Any]] = []

    def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        self.documents.append(document)
        return InsertOneResult(inserted_id=document.get("_id"))

    def count_documents(self) -> int:
        return len(self.documents)

    def find_one(self, document_id: Any) -> Optional[Dict[str, Any]]:
        for document in self.documents:
            if document.get("_id") == document_id:
                return document
        return None


class JSONLinesDocumentSink:
    """Writes one JSON document per line to a file"""

    def __init__(self, path: Union[str, Path], ensure_ascii: bool = False):
        self.path = Path(path)
        self.ensure_ascii = ensure_ascii
        self._handle: Optional[TextIO] = None
        self.inserted = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        if self._handle is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(self.path, "w", encoding="utf-8")
        self._handle.write(json.dumps(document, ensure_ascii=self.ensure_ascii, default=str) + "\n")
        self.inserted += 1
        return InsertOneResult(inserted_id=document.get("_id"))

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
