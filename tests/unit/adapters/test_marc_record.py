"""
Unit tests for the pymarc-backed MarcRecord adapter.
"""

import json

from pymarc import MARCReader

from catalog_export.adapters.records.marc import DEFAULT_LEADER, MarcRecord, build_field, build_record
from catalog_export.adapters.sinks.document import InMemoryDocumentSink


class TestFieldAccess:

    def test_record_id_and_control_number(self, sample_bib_record):
        assert sample_bib_record.record_id == 101
        assert sample_bib_record.control_value("001") == "101"

    def test_record_id_falls_back_to_control_number(self, sample_bib_record):
        unwrapped = MarcRecord(sample_bib_record.record)
        assert unwrapped.record_id == "101"

    def test_tags_in_order(self, sample_bib_record):
        assert sample_bib_record.tags() == ["001", "005", "245", "590", "949"]
        assert sample_bib_record.has_tag("590")
        assert not sample_bib_record.has_tag("650")

    def test_first_value(self, sample_bib_record):
        assert sample_bib_record.first_value("245", "a") == "Moby Dick /"
        assert sample_bib_record.first_value("245", "z") is None
        assert sample_bib_record.first_value("005", "a") is None

    def test_status_from_leader(self, sample_bib_record):
        assert sample_bib_record.leader == DEFAULT_LEADER
        assert sample_bib_record.status == "c"
        assert not sample_bib_record.is_deleted

        deleted = build_record(5, leader="00000dam a2200000 a 4500")
        assert deleted.is_deleted


class TestMutation:

    def test_delete_tag_removes_every_occurrence(self):
        record = build_record(1, [
            ("590", " ", " ", [("a", "first")]),
            ("590", " ", " ", [("a", "second")]),
            ("650", " ", "0", [("a", "Whales")]),
        ])

        record.delete_tag("590")

        assert record.tags() == ["001", "650"]

    def test_delete_missing_tag_is_harmless(self, sample_bib_record):
        sample_bib_record.delete_tag("999")
        assert len(sample_bib_record.tags()) == 5

    def test_added_fields_keep_tag_order(self, sample_bib_record):
        sample_bib_record.add_data_field("650", " ", "0", [("a", "Whaling")])
        sample_bib_record.add_control_field("008", "240102s1851    nyu           000 1 eng d")

        assert sample_bib_record.tags() == ["001", "005", "008", "245", "590", "650", "949"]

    def test_build_field_variants(self):
        control = build_field(("001", "42"))
        data = build_field(("245", "1", "0", [("a", "Title")]))

        assert control.is_control_field()
        assert data.indicator1 == "1"
        assert data.indicator2 == "0"
        assert data.get_subfields("a") == ["Title"]


class TestSerializers:

    def test_to_xml(self, sample_bib_record):
        xml = sample_bib_record.to_xml()

        assert "<record" in xml
        assert xml.endswith("</record>\n")
        assert 'tag="245"' in xml
        assert "Moby Dick /" in xml

    def test_to_json(self, sample_bib_record):
        text = sample_bib_record.to_json()
        document = json.loads(text)

        assert text.endswith("\n")
        assert document["leader"]
        assert {"001": "101"} in document["fields"]

    def test_to_mrc_round_trips_through_reader(self, sample_bib_record):
        transmission = sample_bib_record.to_mrc()

        assert transmission.endswith("\x1d")
        decoded = next(iter(MARCReader(transmission.encode("utf-8"), to_unicode=True, force_utf8=True)))
        assert decoded["245"]["a"] == "Moby Dick /"

    def test_to_mrk(self, sample_bib_record):
        text = sample_bib_record.to_mrk()
        lines = text.splitlines()

        assert lines[0].startswith("=LDR  ")
        assert "=001  101" in lines
        assert any(line.startswith("=245  10$aMoby Dick /") for line in lines)
        assert text.endswith("\n\n")

    def test_to_mongo_inserts_document(self, sample_bib_record):
        sink = InMemoryDocumentSink()

        result = sample_bib_record.to_mongo(sink)

        assert result.inserted_id == 101
        document = sink.find_one(101)
        assert document["leader"]
        assert {"001": "101"} in document["fields"]

    def test_non_ascii_text_survives(self):
        record = build_record(7, [("245", "0", "0", [("a", "Les misérables")])])

        assert "Les misérables" in record.to_xml()
        assert "Les misérables" in record.to_mrk()
        assert "Les misérables" in json.loads(record.to_json())["fields"][1]["245"]["subfields"][0]["a"]
