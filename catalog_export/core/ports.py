"""
Port interfaces for catalog record export.

These interfaces define the contracts between the export pipeline and its
collaborators: the record source, the record codec, export policies, document
sinks, progress reporting and configuration. They enable dependency inversion
and allow for easy testing with mock implementations.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from .domain import AuditAccumulator, ExportSummary, ItemAccumulator


@runtime_checkable
class DocumentSinkPort(Protocol):
    """Port for a document-store collection receiving one document per record"""

    def insert_one(self, document: Dict[str, Any]) -> Any:
        """
        Store a single converted record.

        Args:
            document: Record converted to a document

        Returns:
            Sink-specific insertion result
        """
        ...


class CatalogRecordPort(Protocol):
    """Port for a retrieved catalog record (the record codec surface)"""

    @property
    def record_id(self) -> Any:
        """Identifier the record was retrieved under"""
        ...

    def delete_tag(self, tag: str) -> None:
        """Remove every field with the given tag code"""
        ...

    def to_xml(self) -> str:
        ...

    def to_json(self) -> str:
        ...

    def to_mrc(self) -> str:
        ...

    def to_mrk(self) -> str:
        ...

    def to_mongo(self, sink: DocumentSinkPort) -> Any:
        """Convert to a document and hand it to the sink"""
        ...


RecordCallback = Callable[[CatalogRecordPort], None]


class RecordSourcePort(Protocol):
    """Port for the query/storage layer holding catalog records"""

    def modified_since(self, record_kind: str, since: Any, until: Optional[Any] = None) -> List[Any]:
        """
        Get identifiers of records modified within [since, until).

        Args:
            record_kind: "Bib" or "Auth"
            since: Inclusive lower bound
            until: Exclusive upper bound, "now" when None

        Returns:
            Ordered list of record identifiers
        """
        ...

    def query(self, criteria: str) -> Iterable[Sequence[Any]]:
        """
        Execute an arbitrary selection query.

        Returns:
            Result rows; the first column holds the record identifier
        """
        ...

    def iterate(self, record_kind: str, encoding: str, criteria: str, callback: RecordCallback) -> None:
        """
        Retrieve records and invoke callback once per record, in retrieval order.

        Args:
            record_kind: "Bib" or "Auth"
            encoding: Text encoding for decoded records
            criteria: Comma-joined identifier list
            callback: Invoked synchronously for each record

        Raises:
            Exception: Any retrieval failure fails the whole call
        """
        ...


class ExportPolicyPort(Protocol):
    """Port for record-kind specific exclusion and transformation rules"""

    @property
    def record_kind(self) -> str:
        ...

    def exclude(self, record: CatalogRecordPort) -> bool:
        """Return True when the record must not be written"""
        ...

    def transform(self, record: CatalogRecordPort, audit: AuditAccumulator,
                  item: Optional[ItemAccumulator]) -> None:
        """Mutate the record in place and update the batch accumulators"""
        ...


class ProgressReportingPort(Protocol):
    """Port for progress and run summary presentation"""

    def start(self, total: int) -> None:
        """
        Announce the start of a run.

        Args:
            total: Number of identifiers to process
        """
        ...

    def update(self, current: int, total: int) -> None:
        """
        Redraw the progress indicator.

        Args:
            current: Records processed so far
            total: Records expected overall
        """
        ...

    def finish(self, summary: ExportSummary) -> None:
        """Report the final run summary"""
        ...

    def stop(self) -> None:
        """
        Tear down the progress display after a failed run.

        Called instead of finish() when the run raises.
        """
        ...

    def is_progress_enabled(self) -> bool:
        ...


class ConfigurationPort(Protocol):
    """Port for configuration management"""

    def get_export_config(self) -> Dict[str, Any]:
        """
        Get export settings (output directory, batch size, exclusion tags, ...).

        Returns:
            Dictionary of export configuration values
        """
        ...

    def get_source_config(self) -> Dict[str, Any]:
        """Get record source settings (database location, ...)"""
        ...

    def validate_config(self) -> bool:
        ...
