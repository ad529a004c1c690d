"""
SQL Record Source Adapter

Reads ISO 2709 MARC records from a DB-API 2.0 connection. The expected
table layout is::

    marc_records(record_id INTEGER, kind TEXT, marc BLOB, modified TEXT)

with `modified` holding ISO 8601 timestamps so they compare as text.
"""

from datetime import date, datetime
from typing import Any, List, Optional, Sequence

from pymarc import MARCReader

from ...core.ports import RecordCallback
from ..records.marc import MarcRecord

SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    record_id INTEGER NOT NULL,
    kind TEXT NOT NULL,
    marc BLOB NOT NULL,
    modified TEXT NOT NULL,
    PRIMARY KEY (record_id, kind)
)
"""

ENCODINGS = {
    'utf8': 'utf-8',
    'utf-8': 'utf-8',
    'latin1': 'iso8859-1',
}


def to_timestamp(value: Any) -> str:
    """Normalize dates and datetimes to sortable ISO 8601 text"""
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class SQLRecordSource:
    """Record source backed by a DB-API connection (qmark parameter style)"""

    def __init__(self, connection: Any, table: str = "marc_records"):
        self.connection = connection
        self.table = table

    def create_schema(self) -> None:
        self.connection.execute(SCHEMA.format(table=self.table))
        self.connection.commit()

    def store_record(self, record: MarcRecord, record_kind: str, modified: Any) -> None:
        """Insert or replace one record"""
        self.connection.execute(
            f"INSERT OR REPLACE INTO {self.table} (record_id, kind, marc, modified) VALUES (?, ?, ?, ?)",
            (record.record_id, record_kind, record.record.as_marc(), to_timestamp(modified))
        )
        self.connection.commit()

    def modified_since(self, record_kind: str, since: Any, until: Optional[Any] = None) -> List[Any]:
        until = until if until is not None else datetime.now()
        cursor = self.connection.cursor()
        try:
            cursor.execute(
                f"SELECT record_id FROM {self.table} "
                "WHERE kind = ? AND modified >= ? AND modified < ? ORDER BY record_id",
                (record_kind, to_timestamp(since), to_timestamp(until))
            )
            return [row[0] for row in cursor.fetchall()]
        finally:
            cursor.close()

    def query(self, criteria: str) -> List[Sequence[Any]]:
        cursor = self.connection.cursor()
        try:
            cursor.execute(criteria)
            return cursor.fetchall()
        finally:
            cursor.close()

    def iterate(self, record_kind: str, encoding: str, criteria: str, callback: RecordCallback) -> None:
        identifiers = [identifier.strip() for identifier in criteria.split(",") if identifier.strip()]
        if not identifiers:
            return

        placeholders = ", ".join("?" for _ in identifiers)
        cursor = self.connection.cursor()
        try:
            cursor.execute(
                f"SELECT record_id, marc FROM {self.table} "
                f"WHERE kind = ? AND record_id IN ({placeholders})",
                [record_kind, *identifiers]
            )
            rows = cursor.fetchall()
        finally:
            cursor.close()

        file_encoding = ENCODINGS.get(encoding.lower(), encoding)
        # Records come back in the order the identifiers were listed
        rows_by_id = {str(row[0]): row for row in rows}
        for identifier in identifiers:
            row = rows_by_id.pop(identifier, None)
            if row is None:
                continue
            record_id, marc = row
            callback(MarcRecord(self._decode(record_id, marc, file_encoding), record_id))

    @staticmethod
    def _decode(record_id: Any, marc: bytes, file_encoding: str):
        reader = MARCReader(
            bytes(marc), to_unicode=True, force_utf8=(file_encoding == "utf-8"), file_encoding=file_encoding
        )
        record = next(iter(reader), None)
        if record is None:
            raise ValueError(f"Could not decode MARC record {record_id}: {reader.current_exception}")
        return record
