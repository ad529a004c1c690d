"""
Export Service - Core record export pipeline.

Streams the records selected by an export configuration from the record
source, through the export policy, and out to the configured destination,
one bounded batch at a time.
"""

import time
from typing import Any, List, Optional

from .domain import BIB, AuditAccumulator, ExportSummary, ItemAccumulator
from .exceptions import CatalogExportError, ErrorTranslator, ExportConfigurationError
from .export_configuration import ExportConfiguration
from .identifiers import IdentifierResolver, batch_identifiers
from .output_dispatcher import OutputDispatcher
from .ports import CatalogRecordPort, ExportPolicyPort, ProgressReportingPort, RecordSourcePort

RECORD_ENCODING = "utf8"
PROGRESS_INTERVAL = 5


class ExportService:
    """
    Core export business logic.

    This service orchestrates a complete export run using injected adapters
    for the record source, the record-kind policy and progress reporting.
    Runs are synchronous and sequential; any retrieval, policy or output
    error is fatal and propagates to the caller with output written so far
    left in place.
    """

    def __init__(
        self,
        source: RecordSourcePort,
        policy: ExportPolicyPort,
        progress: ProgressReportingPort
    ):
        self.source = source
        self.policy = policy
        self.progress = progress

    def run(self, config: ExportConfiguration) -> ExportSummary:
        """
        Main export workflow.

        Args:
            config: Export configuration driving this run (one run per instance)

        Returns:
            ExportSummary with counts and elapsed time

        Raises:
            ExportConfigurationError: If the configuration or policy is incomplete
            RecordRetrievalError: If the record source fails
            OutputError: If writing to the destination fails
        """
        config.validate_or_raise()
        record_kind = self._resolve_record_kind(config)
        config.mark_consumed()

        dispatcher = OutputDispatcher(config)
        identifiers = IdentifierResolver(config, self.source, record_kind).resolve()

        summary = ExportSummary(
            export_id=config.export_id,
            record_kind=record_kind,
            output_type=dispatcher.output_type.value,
            total=len(identifiers)
        )
        start_time = time.time()

        self.progress.start(summary.total)
        try:
            for batch in batch_identifiers(identifiers, config.batch_size):
                self._export_batch(batch, config, dispatcher, summary)
        except BaseException:
            self.progress.stop()
            raise
        finally:
            config.close()

        summary.elapsed = time.time() - start_time
        self.progress.finish(summary)

        return summary

    def _resolve_record_kind(self, config: ExportConfiguration) -> str:
        record_kind = self.policy.record_kind
        if config.record_kind and config.record_kind != record_kind:
            raise ExportConfigurationError(
                f"Configuration record kind '{config.record_kind}' does not match "
                f"policy record kind '{record_kind}'"
            )
        config.record_kind = record_kind
        return record_kind

    def _export_batch(
        self,
        batch: List[Any],
        config: ExportConfiguration,
        dispatcher: OutputDispatcher,
        summary: ExportSummary
    ) -> None:
        """Stream one batch of records from the source to the destination"""
        record_kind = summary.record_kind
        audit = AuditAccumulator(record_type=record_kind.lower(), filter=batch)
        item = ItemAccumulator(filter=batch) if record_kind == BIB else None

        dispatcher.open_collection()

        callback_errors: List[BaseException] = []

        def handle_record(record: CatalogRecordPort) -> None:
            try:
                self._process_record(record, config, dispatcher, summary, audit, item)
            except Exception as e:
                callback_errors.append(e)
                raise

        criteria = ",".join(str(identifier) for identifier in batch)
        try:
            self.source.iterate(record_kind, RECORD_ENCODING, criteria, handle_record)
        except CatalogExportError:
            raise
        except Exception as e:
            # Policy errors raised inside the callback keep their own type
            if any(e is error for error in callback_errors):
                raise
            raise ErrorTranslator.translate_retrieval_error(
                e, record_kind, f"batch of {len(batch)} identifiers"
            ) from e

        dispatcher.close_collection()
        summary.batches += 1

    def _process_record(
        self,
        record: CatalogRecordPort,
        config: ExportConfiguration,
        dispatcher: OutputDispatcher,
        summary: ExportSummary,
        audit: AuditAccumulator,
        item: Optional[ItemAccumulator]
    ) -> None:
        summary.processed += 1
        current = summary.processed

        if current == summary.total or (current % PROGRESS_INTERVAL == 0 and config.reports_periodic_progress):
            self.progress.update(current, summary.total)

        if self.policy.exclude(record):
            summary.excluded += 1
            return

        self.policy.transform(record, audit, item)

        for tag in config.exclude_tags:
            record.delete_tag(tag)

        dispatcher.write(record)
        summary.written += 1
