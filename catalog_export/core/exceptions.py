"""
Domain-Specific Exceptions

Defines the exception hierarchy and error boundaries for the catalog export
pipeline. Infrastructure errors raised by record sources and output handles
are translated into these at the architectural boundaries.
"""

from typing import Any, Dict, List, Optional


class CatalogExportError(Exception):
    """Base exception for all catalog export errors"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ExportConfigurationError(CatalogExportError):
    """Raised when export configuration is invalid or incomplete"""

    def __init__(self, message: str, configuration_errors: Optional[List[str]] = None, **context):
        super().__init__(message, context)
        self.configuration_errors = configuration_errors or []


class InvalidOutputTypeError(ExportConfigurationError):
    """Raised when an unsupported output type is requested"""

    def __init__(self, output_type: Any, supported_types: Optional[List[str]] = None):
        message = f"Unsupported output type: '{output_type}'"
        if supported_types:
            message += f". Supported types: {', '.join(supported_types)}"
        super().__init__(message, output_type=output_type, supported_types=supported_types)
        self.output_type = output_type


class InvalidDestinationError(ExportConfigurationError):
    """Raised when an output directory or document sink is unusable"""

    def __init__(self, message: str, destination: Any = None):
        super().__init__(message, destination=destination)
        self.destination = destination


class RecordKindNotDeclaredError(ExportConfigurationError):
    """Raised when a run starts without a record kind"""

    def __init__(self, message: str = 'Attribute "record_kind" must be provided by the export policy'):
        super().__init__(message)


class MissingPolicyMethodError(ExportConfigurationError):
    """Raised the first time a required export policy method is needed but not supplied"""

    def __init__(self, method_name: str, policy_name: Optional[str] = None):
        message = f'Method "{method_name}" must be provided by the export policy'
        if policy_name:
            message += f" ({policy_name})"
        super().__init__(message, method_name=method_name)
        self.method_name = method_name


class RecordRetrievalError(CatalogExportError):
    """Raised when the record source fails to resolve or iterate records"""

    def __init__(self, message: str, record_kind: Optional[str] = None,
                 original_error: Optional[Exception] = None, **context):
        super().__init__(message, context)
        self.record_kind = record_kind
        self.original_error = original_error


class OutputError(CatalogExportError):
    """Raised when writing to the output destination fails"""

    def __init__(self, message: str, output_type: Optional[str] = None,
                 original_error: Optional[Exception] = None, **context):
        super().__init__(message, context)
        self.output_type = output_type
        self.original_error = original_error


class ErrorTranslator:
    """Utility for translating infrastructure exceptions to domain exceptions"""

    @staticmethod
    def translate_retrieval_error(error: Exception, record_kind: str, criteria: str = "") -> RecordRetrievalError:
        message = f"Record retrieval failed for {record_kind}"
        if criteria:
            message += f" ({criteria})"
        message += f": {error}"
        return RecordRetrievalError(message, record_kind=record_kind, original_error=error)

    @staticmethod
    def translate_output_error(error: Exception, output_type: str) -> OutputError:
        if isinstance(error, (OSError, PermissionError)):
            return OutputError(f"Failed to write {output_type} output: {error}",
                               output_type=output_type, original_error=error)
        return OutputError(f"Export output failed: {error}",
                           output_type=output_type, original_error=error)


class ErrorBoundary:
    """
    Context manager translating infrastructure errors at an architectural boundary.

    Domain errors pass through untouched. Anything else is handed to the
    translator and re-raised chained to the original, so nothing is swallowed.
    """

    def __init__(self, boundary_name: str, translate=None, context: Optional[Dict[str, Any]] = None):
        self.boundary_name = boundary_name
        self.translate = translate
        self.context = context or {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or self.translate is None:
            return False
        if issubclass(exc_type, CatalogExportError) or not issubclass(exc_type, Exception):
            return False
        translated = self.translate(exc_val)
        translated.context.setdefault("boundary", self.boundary_name)
        translated.context.update(self.context)
        raise translated from exc_val
