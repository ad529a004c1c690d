"""
Export Configuration Domain Objects

Settings for one export run: record selection, tag exclusion, output type and
destination. Derived values (output type default, serializer name, output
handle, identifier list) are computed once on first use and then fixed for
the run.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Generic, List, Optional, TextIO, TypeVar, Union

from .domain import OutputType, generate_export_id
from .exceptions import ExportConfigurationError, InvalidDestinationError, InvalidOutputTypeError
from .ports import DocumentSinkPort

T = TypeVar("T")

_UNSET = object()


class CachedValue(Generic[T]):
    """Holds a value computed at most once"""

    def __init__(self):
        self._value: Any = _UNSET

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def get_or_compute(self, compute: Callable[[], T]) -> T:
        if self._value is _UNSET:
            self._value = compute()
        return self._value

    def reset(self) -> None:
        self._value = _UNSET

    def __repr__(self) -> str:
        return f"CachedValue({'unset' if not self.is_set else repr(self._value)})"


def coerce_output_type(value: Union[str, OutputType]) -> OutputType:
    """Convert a user-supplied output type, rejecting anything outside the enum"""
    if isinstance(value, OutputType):
        return value
    try:
        return OutputType(str(value).lower())
    except ValueError:
        raise InvalidOutputTypeError(value, OutputType.values()) from None


@dataclass
class ExportConfiguration:
    """Complete export configuration"""

    sql_criteria: Optional[str] = None
    modified_since: Optional[Any] = None
    modified_until: Optional[Any] = None
    exclude_tags: List[str] = field(default_factory=list)
    output_type: Optional[OutputType] = None       # Defaults lazily if None
    output_directory: Union[str, Path] = "."
    output_filename: Optional[str] = None          # Standard output if None
    document_sink: Optional[DocumentSinkPort] = None
    record_kind: Optional[str] = None              # Normally declared by the export policy
    batch_size: int = 1000
    export_id: str = field(default_factory=generate_export_id)

    _resolved_output_type: CachedValue = field(default_factory=CachedValue, init=False, repr=False, compare=False)
    _serializer: CachedValue = field(default_factory=CachedValue, init=False, repr=False, compare=False)
    _output_handle: CachedValue = field(default_factory=CachedValue, init=False, repr=False, compare=False)
    identifier_cache: CachedValue = field(default_factory=CachedValue, init=False, repr=False, compare=False)
    _owns_handle: bool = field(default=False, init=False, repr=False, compare=False)
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "output_type" and value is not None:
            value = coerce_output_type(value)
        elif name == "document_sink" and value is not None:
            self._check_document_sink(value)
        elif name == "exclude_tags":
            value = [value] if value and isinstance(value, str) else list(value or [])
        super().__setattr__(name, value)

    @staticmethod
    def _check_document_sink(sink: Any) -> None:
        if not isinstance(sink, DocumentSinkPort):
            raise InvalidDestinationError(
                f"Document sink must provide insert_one(), got {type(sink).__name__}",
                destination=sink
            )

    # Selection

    @property
    def uses_modification_window(self) -> bool:
        return bool(self.modified_since)

    def get_validation_errors(self) -> List[str]:
        """Get detailed validation errors"""
        errors = []

        if not self.sql_criteria and not self.modified_since:
            errors.append('Attribute "sql_criteria" or "modified_since" must be set')

        if not isinstance(self.batch_size, int) or self.batch_size < 1:
            errors.append(f"Batch size must be a positive integer, got: {self.batch_size!r}")

        if self.output_type is OutputType.MONGO and self.document_sink is None:
            errors.append('Output type "mongo" requires a document sink')

        return errors

    def validate(self) -> bool:
        try:
            self.validate_or_raise()
            return True
        except ExportConfigurationError:
            return False

    def validate_or_raise(self) -> None:
        """Validate run-start requirements, raising before any I/O happens"""
        errors = self.get_validation_errors()
        if errors:
            raise ExportConfigurationError(
                "; ".join(errors),
                configuration_errors=errors
            )

    @property
    def is_consumed(self) -> bool:
        return self._consumed

    def mark_consumed(self) -> None:
        """Claim this configuration for a run; the identifier list is consumed destructively"""
        if self._consumed:
            raise ExportConfigurationError(
                f"Export configuration {self.export_id} has already driven a run"
            )
        self._consumed = True

    # Output

    def resolve_output_type(self) -> OutputType:
        """Resolve the output type once; later changes to the sink do not move it"""
        def default() -> OutputType:
            if self.output_type is not None:
                return self.output_type
            if self.document_sink is not None:
                return OutputType.MONGO
            return OutputType.XML

        return self._resolved_output_type.get_or_compute(default)

    @property
    def serializer(self) -> str:
        """Name of the record serialization method for the output type"""
        return self._serializer.get_or_compute(lambda: f"to_{self.resolve_output_type().value}")

    @property
    def has_file_destination(self) -> bool:
        return bool(self.output_filename)

    @property
    def has_document_destination(self) -> bool:
        return self.document_sink is not None

    @property
    def reports_periodic_progress(self) -> bool:
        """Progress is redrawn every few records only when stdout is free for it"""
        return self.has_file_destination or self.has_document_destination

    def get_output_path(self) -> Path:
        directory = Path(self.output_directory)
        if not directory.is_dir():
            raise InvalidDestinationError(
                f"Output directory does not exist: {directory}",
                destination=str(directory)
            )
        return directory / self.output_filename

    def get_output_handle(self) -> TextIO:
        """Open the destination on first use and reuse it for the rest of the run"""
        def open_handle() -> TextIO:
            if self.output_filename:
                handle = open(self.get_output_path(), "w", encoding="utf-8", newline="")
                self._owns_handle = True
                return handle
            return sys.stdout

        return self._output_handle.get_or_compute(open_handle)

    def close(self) -> None:
        """Close the output handle if this configuration opened it"""
        if self._output_handle.is_set and self._owns_handle:
            self._output_handle.get_or_compute(lambda: None).close()
            self._owns_handle = False
