"""
Core domain models for catalog record export.

These models define the value objects used by the export pipeline,
independent of any record source or output infrastructure.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class OutputType(Enum):
    """Supported output encodings"""
    XML = "xml"
    JSON = "json"
    MRC = "mrc"
    MRK = "mrk"
    MONGO = "mongo"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    @property
    def is_stream(self) -> bool:
        """True when records are serialized to the output handle"""
        return self is not OutputType.MONGO

    @property
    def overrides_sink(self) -> bool:
        """True for the MARC encodings that stay on the stream when a document sink is set"""
        return self in (OutputType.XML, OutputType.MRK, OutputType.MRC)


BIB = "Bib"
AUTH = "Auth"


def generate_export_id(moment: Optional[datetime] = None) -> str:
    """Timestamp-derived export identifier (ISO 8601, second precision)"""
    moment = moment or datetime.now()
    return moment.strftime("%Y-%m-%dT%H:%M:%S")


@dataclass
class AuditAccumulator:
    """Batch-scoped audit facts collected while records are transformed"""

    record_type: str
    filter: List[Any]
    facts: Dict[Any, Dict[str, Any]] = field(default_factory=dict)

    def record(self, record_id: Any, **facts) -> None:
        """Merge facts about one record of the batch"""
        self.facts.setdefault(record_id, {}).update(facts)

    def get(self, record_id: Any) -> Dict[str, Any]:
        return self.facts.get(record_id, {})

    @property
    def batch_size(self) -> int:
        return len(self.filter)

    @property
    def audited_count(self) -> int:
        return len(self.facts)


@dataclass
class ItemAccumulator:
    """Batch-scoped holdings/item facts, only kept for bibliographic exports"""

    filter: List[Any]
    items: Dict[Any, List[Dict[str, Any]]] = field(default_factory=dict)

    def add_item(self, record_id: Any, **item) -> None:
        self.items.setdefault(record_id, []).append(item)

    def items_for(self, record_id: Any) -> List[Dict[str, Any]]:
        return self.items.get(record_id, [])

    @property
    def item_count(self) -> int:
        return sum(len(items) for items in self.items.values())


@dataclass
class ProgressState:
    """Single-line progress indicator state"""

    current: int = 0
    total: int = 0
    last_width: int = 0

    def render(self) -> str:
        return f"{self.current} / {self.total} "


@dataclass
class ExportSummary:
    """Outcome of one export run"""

    export_id: str
    record_kind: str
    output_type: str
    total: int
    processed: int = 0
    written: int = 0
    excluded: int = 0
    batches: int = 0
    elapsed: float = 0.0
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def message(self) -> str:
        return f"wrote {self.written} records in {self.elapsed:.2f} seconds"
