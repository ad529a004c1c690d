"""
Authority Export Policy

Business rules for exporting authority records.
"""

from typing import Optional

from ...core.domain import AUTH, AuditAccumulator, ItemAccumulator
from ...core.policy import ExportPolicy
from ..records.marc import MarcRecord

HEADING_TAGS = ("100", "110", "111", "130", "150", "151", "155")


class AuthExportPolicy(ExportPolicy):
    """Export policy for authority records; skips deleted and headingless records"""

    kind = AUTH

    def __init__(self, require_heading: bool = True):
        self.require_heading = require_heading

    @staticmethod
    def heading(record: MarcRecord) -> Optional[str]:
        for tag in HEADING_TAGS:
            value = record.first_value(tag, "a")
            if value:
                return value
        return None

    def exclude(self, record: MarcRecord) -> bool:
        if record.is_deleted:
            return True
        return self.require_heading and self.heading(record) is None

    def transform(self, record: MarcRecord, audit: AuditAccumulator,
                  item: Optional[ItemAccumulator]) -> None:
        audit.record(record.record_id, status=record.status, heading=self.heading(record))
