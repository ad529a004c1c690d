"""
Export policy base class.

Concrete policies declare the record kind they export and supply the
exclusion and transformation rules. Anything left undeclared fails the first
time the pipeline needs it, not when the policy is constructed.
"""

from typing import Optional

from .domain import AuditAccumulator, ItemAccumulator
from .exceptions import MissingPolicyMethodError, RecordKindNotDeclaredError
from .ports import CatalogRecordPort


class ExportPolicy:
    """Base export policy implementing ExportPolicyPort"""

    kind: Optional[str] = None

    @property
    def record_kind(self) -> str:
        if not self.kind:
            raise RecordKindNotDeclaredError(
                f'Attribute "record_kind" must be provided by {type(self).__name__}'
            )
        return self.kind

    def exclude(self, record: CatalogRecordPort) -> bool:
        raise MissingPolicyMethodError("exclude", type(self).__name__)

    def transform(self, record: CatalogRecordPort, audit: AuditAccumulator,
                  item: Optional[ItemAccumulator]) -> None:
        raise MissingPolicyMethodError("transform", type(self).__name__)


class PassThroughPolicy(ExportPolicy):
    """Exports every record unchanged"""

    def __init__(self, kind: str):
        self.kind = kind

    def exclude(self, record: CatalogRecordPort) -> bool:
        return False

    def transform(self, record: CatalogRecordPort, audit: AuditAccumulator,
                  item: Optional[ItemAccumulator]) -> None:
        audit.record(record.record_id, exported=True)
