"""
Identifier resolution and batching.

Turns an export configuration into the ordered list of record identifiers to
export, and slices that list into bounded batches for retrieval.
"""

from typing import Any, Iterator, List

from .export_configuration import ExportConfiguration
from .exceptions import ErrorBoundary, ErrorTranslator
from .ports import RecordSourcePort

DEFAULT_BATCH_SIZE = 1000


class IdentifierResolver:
    """
    Resolves the identifiers selected by a configuration.

    The result is memoized on the configuration, so it is looked up at most
    once per configuration instance even if selection fields change later.
    """

    def __init__(self, config: ExportConfiguration, source: RecordSourcePort, record_kind: str):
        self.config = config
        self.source = source
        self.record_kind = record_kind

    def resolve(self) -> List[Any]:
        return self.config.identifier_cache.get_or_compute(self._lookup)

    def _lookup(self) -> List[Any]:
        if self.config.uses_modification_window:
            criteria = f"modified since {self.config.modified_since}"
        else:
            criteria = str(self.config.sql_criteria)

        with ErrorBoundary(
            "IdentifierResolver.resolve",
            lambda error: ErrorTranslator.translate_retrieval_error(error, self.record_kind, criteria)
        ):
            if self.config.uses_modification_window:
                return list(self.source.modified_since(
                    self.record_kind,
                    self.config.modified_since,
                    self.config.modified_until
                ))
            return [row[0] for row in self.source.query(self.config.sql_criteria)]


def batch_identifiers(identifiers: List[Any], size: int = DEFAULT_BATCH_SIZE) -> Iterator[List[Any]]:
    """
    Yield successive batches of at most `size` identifiers.

    The list is consumed from the front as batches are taken, so the
    generator cannot be restarted and the list is empty once exhausted.
    """
    if size < 1:
        raise ValueError(f"Batch size must be positive, got: {size}")

    while identifiers:
        batch = identifiers[:size]
        del identifiers[:size]
        yield batch
