"""
In-memory record sources for testing and mock exports.
"""

import copy
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ...core.domain import AUTH, BIB
from ...core.ports import RecordCallback
from ..records.marc import DEFAULT_AUTH_LEADER, DEFAULT_LEADER, MarcRecord, build_record


class InMemoryRecordSource:
    """Record source holding records per kind in insertion order"""

    def __init__(self):
        self._records: Dict[str, Dict[str, MarcRecord]] = {}
        self._modified: Dict[str, Dict[str, Any]] = {}
        self._queries: Dict[str, List[Tuple[Any, ...]]] = {}
        self.iterate_calls: List[Dict[str, Any]] = []

    def add_record(self, record: MarcRecord, record_kind: str = BIB, modified: Optional[Any] = None) -> None:
        key = str(record.record_id)
        self._records.setdefault(record_kind, {})[key] = record
        if modified is not None:
            self._modified.setdefault(record_kind, {})[key] = modified

    def add_records(self, records: Iterable[MarcRecord], record_kind: str = BIB) -> None:
        for record in records:
            self.add_record(record, record_kind)

    def register_query(self, criteria: str, rows: Iterable[Sequence[Any]]) -> None:
        """Register the result rows a criteria string resolves to"""
        self._queries[criteria] = [tuple(row) for row in rows]

    def record_ids(self, record_kind: str = BIB) -> List[str]:
        return list(self._records.get(record_kind, {}).keys())

    def modified_since(self, record_kind: str, since: Any, until: Optional[Any] = None) -> List[Any]:
        modified = self._modified.get(record_kind, {})
        return [
            self._records[record_kind][key].record_id
            for key, stamp in modified.items()
            if since <= stamp and (until is None or stamp < until)
        ]

    def query(self, criteria: str) -> List[Tuple[Any, ...]]:
        if criteria not in self._queries:
            raise ValueError(f"Unknown query criteria: {criteria}")
        return list(self._queries[criteria])

    def iterate(self, record_kind: str, encoding: str, criteria: str, callback: RecordCallback) -> None:
        self.iterate_calls.append({
            'record_kind': record_kind,
            'encoding': encoding,
            'criteria': criteria
        })
        records = self._records.get(record_kind, {})
        for key in criteria.split(","):
            record = records.get(key.strip())
            if record is None:
                continue
            # Each retrieval hands out a fresh copy, like a database read
            callback(MarcRecord(copy.deepcopy(record.record), record.record_id))


class MockRecordSource(InMemoryRecordSource):
    """Generates sample bibliographic and authority records; any query selects them all"""

    def __init__(self, count: int = 25, base_date: Optional[datetime] = None):
        super().__init__()
        self.count = count
        base_date = base_date or datetime(2024, 1, 1)

        for number in range(1, count + 1):
            modified = base_date + timedelta(days=number)
            self.add_record(self._sample_bib(number), BIB, modified)
            self.add_record(self._sample_auth(number), AUTH, modified)

    @staticmethod
    def _sample_bib(number: int) -> MarcRecord:
        return build_record(number, [
            ("005", "20240101000000.0"),
            ("100", "1", " ", [("a", f"Author, Sample {number}.")]),
            ("245", "1", "0", [("a", f"Sample title {number} /"), ("c", f"Sample Author {number}.")]),
            ("260", " ", " ", [("a", "Springfield :"), ("b", "Example Press,"), ("c", "2024.")]),
            ("949", " ", " ", [("p", f"3100000{number:05d}"), ("l", "stacks"), ("c", f"QA{number}")]),
        ], leader=DEFAULT_LEADER)

    @staticmethod
    def _sample_auth(number: int) -> MarcRecord:
        return build_record(number, [
            ("005", "20240101000000.0"),
            ("100", "1", " ", [("a", f"Author, Sample {number}")]),
            ("670", " ", " ", [("a", f"Sample title {number}, 2024.")]),
        ], leader=DEFAULT_AUTH_LEADER)

    def query(self, criteria: str) -> List[Tuple[Any, ...]]:
        if criteria in self._queries:
            return super().query(criteria)
        return [(record_id,) for record_id in range(1, self.count + 1)]
