"""
Unit tests for identifier resolution, batching and output dispatch.
"""

import io
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from export_helpers import FakeRecord, StubRecordSource

from catalog_export.adapters.sinks.document import InMemoryDocumentSink
from catalog_export.core import export_configuration
from catalog_export.core.exceptions import OutputError, RecordRetrievalError
from catalog_export.core.export_configuration import ExportConfiguration
from catalog_export.core.identifiers import IdentifierResolver, batch_identifiers
from catalog_export.core.output_dispatcher import OutputDispatcher, XML_HEADER


class TestBatchIdentifiers:

    def test_slices_into_bounded_batches(self):
        identifiers = list(range(2500))
        batches = list(batch_identifiers(identifiers, 1000))

        assert [len(batch) for batch in batches] == [1000, 1000, 500]
        assert batches[0][0] == 0
        assert batches[2][-1] == 2499

    def test_consumes_the_list(self):
        identifiers = [1, 2, 3]
        batches = batch_identifiers(identifiers, 2)

        assert next(batches) == [1, 2]
        assert identifiers == [3]
        assert next(batches) == [3]
        assert identifiers == []

    def test_empty_list_yields_nothing(self):
        assert list(batch_identifiers([], 10)) == []

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError, match="positive"):
            list(batch_identifiers([1], 0))


class TestIdentifierResolver:

    def test_resolves_through_query(self):
        source = StubRecordSource(identifiers=[5, 6])
        config = ExportConfiguration(sql_criteria="SELECT record_id FROM marc_records")

        assert IdentifierResolver(config, source, "Bib").resolve() == [5, 6]

    def test_window_takes_precedence_over_query(self):
        source = StubRecordSource(identifiers=[1], modified=[9])
        config = ExportConfiguration(sql_criteria="SELECT 1", modified_since="2024-01-01")

        assert IdentifierResolver(config, source, "Bib").resolve() == [9]
        assert source.query_calls == []

    def test_resolution_is_memoized(self):
        source = StubRecordSource(identifiers=[1, 2])
        config = ExportConfiguration(sql_criteria="SELECT 1")

        first = IdentifierResolver(config, source, "Bib").resolve()
        config.sql_criteria = "SELECT 2"
        second = IdentifierResolver(config, source, "Bib").resolve()

        assert first is second
        assert source.query_calls == ["SELECT 1"]

    def test_lookup_failure_is_translated(self):
        source = StubRecordSource()
        source.modified_since = Mock(side_effect=RuntimeError("timeout"))
        config = ExportConfiguration(modified_since="2024-01-01")

        with pytest.raises(RecordRetrievalError, match="modified since 2024-01-01") as exc_info:
            IdentifierResolver(config, source, "Auth").resolve()
        assert exc_info.value.context["boundary"] == "IdentifierResolver.resolve"


class TestOutputDispatcher:

    @pytest.fixture(autouse=True)
    def capture_stdout(self, monkeypatch):
        # pytest re-installs its own capture stream on sys.stdout before each
        # test runs, so patch the sys reference the configuration reads instead
        monkeypatch.setattr(export_configuration, "sys", SimpleNamespace(stdout=io.StringIO()))

    def make_config(self, **settings):
        return ExportConfiguration(sql_criteria="SELECT 1", **settings)

    def test_xml_framing(self):
        config = self.make_config()
        dispatcher = OutputDispatcher(config)

        dispatcher.open_collection()
        dispatcher.write(FakeRecord(1))
        dispatcher.close_collection()

        assert config.get_output_handle().getvalue() == (
            XML_HEADER + "\n<collection>\n" + '<record id="1">001,245,949</record>\n' + "</collection>"
        )

    def test_no_framing_for_other_types(self):
        config = self.make_config(output_type="json")
        dispatcher = OutputDispatcher(config)

        dispatcher.open_collection()
        dispatcher.close_collection()

        assert config.get_output_handle().getvalue() == ""
        assert dispatcher.writes_markup is False

    def test_mrc_serializer(self):
        config = self.make_config(output_type="mrc")
        OutputDispatcher(config).write(FakeRecord(4, tags=["001"]))

        assert config.get_output_handle().getvalue() == "4\x1e001\x1d"

    def test_sink_used_for_mongo(self):
        sink = InMemoryDocumentSink()
        config = self.make_config(document_sink=sink)

        OutputDispatcher(config).write(FakeRecord(2))

        assert sink.count_documents() == 1
        assert config.get_output_handle().getvalue() == ""

    def test_sink_takes_precedence_over_json(self):
        sink = InMemoryDocumentSink()
        config = self.make_config(output_type="json", document_sink=sink)

        OutputDispatcher(config).write(FakeRecord(2))

        assert sink.count_documents() == 1
        assert not config._output_handle.is_set

    def test_json_serialized_without_sink(self):
        config = self.make_config(output_type="json")

        OutputDispatcher(config).write(FakeRecord(2))

        assert config.get_output_handle().getvalue() == '{"id": 2}\n'

    @pytest.mark.parametrize("output_type", ["xml", "mrk", "mrc"])
    def test_marc_encodings_ignore_sink(self, output_type):
        sink = InMemoryDocumentSink()
        config = self.make_config(output_type=output_type, document_sink=sink)
        dispatcher = OutputDispatcher(config)

        dispatcher.write(FakeRecord(3))

        assert dispatcher.streams_record is True
        assert sink.count_documents() == 0
        assert "3" in config.get_output_handle().getvalue()

    def test_write_failure_is_translated(self):
        config = self.make_config(output_type="xml")
        config.get_output_handle().close()

        with pytest.raises(OutputError) as exc_info:
            OutputDispatcher(config).write(FakeRecord(1))
        assert exc_info.value.output_type == "xml"
        assert isinstance(exc_info.value.original_error, ValueError)
