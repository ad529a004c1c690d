"""
Core domain layer

Contains the export pipeline, domain models, and port interfaces that are
independent of record storage and output infrastructure.
"""

from .domain import (
    AUTH,
    BIB,
    AuditAccumulator,
    ExportSummary,
    ItemAccumulator,
    OutputType,
    ProgressState,
)

from .export_configuration import ExportConfiguration
from .export_service import ExportService
from .identifiers import IdentifierResolver, batch_identifiers
from .output_dispatcher import OutputDispatcher, XML_HEADER
from .policy import ExportPolicy, PassThroughPolicy

from .ports import (
    CatalogRecordPort,
    ConfigurationPort,
    DocumentSinkPort,
    ExportPolicyPort,
    ProgressReportingPort,
    RecordSourcePort,
)

from .exceptions import (
    CatalogExportError,
    ExportConfigurationError,
    InvalidDestinationError,
    InvalidOutputTypeError,
    MissingPolicyMethodError,
    OutputError,
    RecordKindNotDeclaredError,
    RecordRetrievalError,
)

__all__ = [
    # Domain models
    'AUTH',
    'BIB',
    'AuditAccumulator',
    'ExportSummary',
    'ItemAccumulator',
    'OutputType',
    'ProgressState',

    # Services
    'ExportService',
    'IdentifierResolver',
    'OutputDispatcher',
    'batch_identifiers',
    'XML_HEADER',

    # Export domain objects
    'ExportConfiguration',
    'ExportPolicy',
    'PassThroughPolicy',

    # Ports
    'CatalogRecordPort',
    'ConfigurationPort',
    'DocumentSinkPort',
    'ExportPolicyPort',
    'ProgressReportingPort',
    'RecordSourcePort',

    # Exceptions
    'CatalogExportError',
    'ExportConfigurationError',
    'InvalidDestinationError',
    'InvalidOutputTypeError',
    'MissingPolicyMethodError',
    'OutputError',
    'RecordKindNotDeclaredError',
    'RecordRetrievalError',
]
