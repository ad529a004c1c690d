"""
Output dispatch for exported records.

Routes each record either to a serializer writing to the output handle, or
to the configured document sink, and writes the MARCXML collection framing.
"""

from .domain import OutputType
from .export_configuration import ExportConfiguration
from .exceptions import ErrorBoundary, ErrorTranslator
from .ports import CatalogRecordPort

XML_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE marc [
	<!ELEMENT collection (record*)>
	<!ATTLIST collection xmlns CDATA "">
	<!ELEMENT record (leader,controlfield+,datafield+)>
	<!ELEMENT leader (#PCDATA)>
	<!ELEMENT controlfield (#PCDATA)>
	<!ATTLIST controlfield tag CDATA "">
	<!ELEMENT datafield (subfield+)>
	<!ATTLIST datafield tag CDATA "" ind1 CDATA "" ind2 CDATA "">
	<!ELEMENT subfield (#PCDATA)>
	<!ATTLIST subfield code CDATA "">
]>
"""

COLLECTION_OPEN = "<collection>"
COLLECTION_CLOSE = "</collection>"


class OutputDispatcher:
    """Writes records and format framing to the configured destination"""

    def __init__(self, config: ExportConfiguration):
        self.config = config

    @property
    def output_type(self) -> OutputType:
        return self.config.resolve_output_type()

    @property
    def writes_markup(self) -> bool:
        return self.output_type is OutputType.XML

    @property
    def streams_record(self) -> bool:
        """True when records are serialized onto the output handle"""
        if self.output_type.overrides_sink:
            return True
        return self.config.document_sink is None and self.output_type.is_stream

    def _boundary(self, name: str) -> ErrorBoundary:
        return ErrorBoundary(
            f"OutputDispatcher.{name}",
            lambda error: ErrorTranslator.translate_output_error(error, self.output_type.value)
        )

    def open_collection(self) -> None:
        """Write the markup preamble and an opening collection marker"""
        if not self.writes_markup:
            return
        with self._boundary("open_collection"):
            self.config.get_output_handle().write(XML_HEADER + "\n" + COLLECTION_OPEN + "\n")

    def close_collection(self) -> None:
        if not self.writes_markup:
            return
        with self._boundary("close_collection"):
            handle = self.config.get_output_handle()
            handle.write(COLLECTION_CLOSE)
            handle.flush()

    def write(self, record: CatalogRecordPort) -> None:
        """
        Write one record.

        xml, mrk and mrc are always serialized with `to_<type>` onto the
        output handle. Any other type goes to the document sink when one is
        configured, and json is serialized to the handle only without a sink.
        Exactly one path runs.
        """
        with self._boundary("write"):
            if self.streams_record:
                serialize = getattr(record, self.config.serializer)
                self.config.get_output_handle().write(serialize())
            elif self.config.document_sink is not None:
                record.to_mongo(self.config.document_sink)
