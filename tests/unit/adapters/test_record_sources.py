"""
Unit tests for the in-memory, mock and SQL record sources.
"""

import sqlite3
from datetime import date, datetime

import pytest
from pymarc import Field, Indicators, Record, Subfield

from catalog_export.adapters.records.marc import DEFAULT_AUTH_LEADER, MarcRecord, build_record
from catalog_export.adapters.sources.memory import MockRecordSource
from catalog_export.adapters.sources.sql import SQLRecordSource, to_timestamp


def collect(source, record_kind, criteria):
    records = []
    source.iterate(record_kind, "utf8", criteria, records.append)
    return records


class TestInMemoryRecordSource:

    def test_modified_window(self, memory_source):
        assert memory_source.modified_since("Bib", datetime(2024, 1, 1)) == [101]
        assert memory_source.modified_since("Bib", datetime(2024, 1, 3)) == []
        assert memory_source.modified_since("Auth", datetime(2024, 1, 1), datetime(2024, 1, 3)) == []
        assert memory_source.modified_since("Auth", datetime(2024, 1, 1), datetime(2024, 1, 4)) == [201]

    def test_registered_query(self, memory_source):
        memory_source.register_query("all bibs", [(101, "Moby Dick")])

        assert memory_source.query("all bibs") == [(101, "Moby Dick")]
        with pytest.raises(ValueError, match="Unknown query"):
            memory_source.query("nothing")

    def test_iterate_skips_missing_and_copies(self, memory_source):
        records = collect(memory_source, "Bib", "999,101")

        assert [record.record_id for record in records] == [101]
        records[0].delete_tag("245")
        assert collect(memory_source, "Bib", "101")[0].has_tag("245")
        assert memory_source.iterate_calls[0] == {
            'record_kind': "Bib", 'encoding': "utf8", 'criteria': "999,101"
        }

    def test_kinds_are_separate(self, memory_source):
        assert collect(memory_source, "Auth", "101") == []
        assert memory_source.record_ids("Auth") == ["201"]


class TestMockRecordSource:

    def test_generates_both_kinds(self):
        source = MockRecordSource(count=3)

        assert source.record_ids("Bib") == ["1", "2", "3"]
        assert source.record_ids("Auth") == ["1", "2", "3"]
        assert source.query("anything") == [(1,), (2,), (3,)]

    def test_modified_dates_are_daily(self):
        source = MockRecordSource(count=5, base_date=datetime(2024, 1, 1))
        assert source.modified_since("Bib", datetime(2024, 1, 4)) == [3, 4, 5]

    def test_sample_records(self):
        source = MockRecordSource(count=1)
        bib = collect(source, "Bib", "1")[0]
        auth = collect(source, "Auth", "1")[0]

        assert bib.first_value("949", "p") == "310000000001"
        assert auth.leader == DEFAULT_AUTH_LEADER


@pytest.fixture
def sql_source():
    connection = sqlite3.connect(":memory:")
    source = SQLRecordSource(connection)
    source.create_schema()
    yield source
    connection.close()


class TestSQLRecordSource:

    def test_to_timestamp(self):
        assert to_timestamp(datetime(2024, 1, 2, 3, 4, 5, 999)) == "2024-01-02T03:04:05"
        assert to_timestamp(date(2024, 1, 2)) == "2024-01-02"
        assert to_timestamp("2024-01-02") == "2024-01-02"

    def test_store_and_iterate(self, sql_source, sample_bib_record):
        sql_source.store_record(sample_bib_record, "Bib", datetime(2024, 1, 2))

        records = collect(sql_source, "Bib", "101")

        assert len(records) == 1
        assert isinstance(records[0], MarcRecord)
        assert records[0].record_id == 101
        assert records[0].first_value("245", "a") == "Moby Dick /"

    def test_iterate_follows_identifier_order(self, sql_source):
        for record_id in (3, 1, 2):
            sql_source.store_record(build_record(record_id), "Bib", datetime(2024, 1, 2))

        assert [r.record_id for r in collect(sql_source, "Bib", "3, 1,2")] == [3, 1, 2]
        assert [r.record_id for r in collect(sql_source, "Bib", "2,9,1")] == [2, 1]
        assert collect(sql_source, "Bib", "") == []

    def test_iterate_follows_query_order(self, sql_source):
        for record_id in (1, 2, 3):
            sql_source.store_record(build_record(record_id), "Bib", datetime(2024, 1, 2))

        rows = sql_source.query("SELECT record_id FROM marc_records ORDER BY record_id DESC")
        criteria = ",".join(str(row[0]) for row in rows)

        assert [r.record_id for r in collect(sql_source, "Bib", criteria)] == [3, 2, 1]

    def test_iterate_decodes_latin1(self, sql_source):
        record = Record(leader="00000cam  2200000 a 4500")
        record.add_field(Field(tag="001", data="12"))
        record.add_field(Field(tag="245", indicators=Indicators("0", "0"), subfields=[Subfield("a", "Café")]))
        sql_source.connection.execute(
            "INSERT INTO marc_records VALUES (?, ?, ?, ?)", (12, "Bib", record.as_marc(), "2024-01-01")
        )
        records = []

        sql_source.iterate("Bib", "latin1", "12", records.append)

        assert records[0].first_value("245", "a") == "Café"

    def test_modified_window(self, sql_source):
        sql_source.store_record(build_record(1), "Bib", datetime(2024, 1, 1))
        sql_source.store_record(build_record(2), "Bib", datetime(2024, 2, 1))
        sql_source.store_record(build_record(3), "Auth", datetime(2024, 2, 1))

        assert sql_source.modified_since("Bib", date(2024, 1, 15)) == [2]
        assert sql_source.modified_since("Bib", datetime(2023, 1, 1), datetime(2024, 2, 1)) == [1]
        assert sql_source.modified_since("Auth", "2024-01-01") == [3]

    def test_query_returns_rows(self, sql_source):
        sql_source.store_record(build_record(5), "Bib", datetime(2024, 1, 1))

        rows = sql_source.query("SELECT record_id, kind FROM marc_records")

        assert [tuple(row) for row in rows] == [(5, "Bib")]

    def test_undecodable_record(self, sql_source):
        sql_source.connection.execute(
            "INSERT INTO marc_records VALUES (?, ?, ?, ?)", (9, "Bib", b"not marc", "2024-01-01")
        )

        with pytest.raises(ValueError, match="Could not decode MARC record 9"):
            collect(sql_source, "Bib", "9")

    def test_bad_query_propagates(self, sql_source):
        with pytest.raises(sqlite3.OperationalError):
            sql_source.query("SELECT nope FROM nowhere")
