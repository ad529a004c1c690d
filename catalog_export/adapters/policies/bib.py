"""
Bibliographic Export Policy

Business rules for exporting bibliographic records: deleted and suppressed
records are skipped, holdings/item fields are collected into the batch item
accumulator, and audit facts are recorded per record.
"""

from typing import Any, Iterable, Optional

from ...core.domain import BIB, AuditAccumulator, ItemAccumulator
from ...core.policy import ExportPolicy
from ..records.marc import MarcRecord

# Subfield code -> item attribute for local item fields
ITEM_SUBFIELDS = {
    'p': 'barcode',
    'l': 'location',
    'c': 'call_number',
}


class BibExportPolicy(ExportPolicy):
    """Export policy for bibliographic records"""

    kind = BIB

    def __init__(
        self,
        suppressed_ids: Optional[Iterable[Any]] = None,
        item_tag: str = "949",
        strip_item_fields: bool = False,
        include_deleted: bool = False
    ):
        self.suppressed_ids = {str(record_id) for record_id in (suppressed_ids or [])}
        self.item_tag = item_tag
        self.strip_item_fields = strip_item_fields
        self.include_deleted = include_deleted

    def exclude(self, record: MarcRecord) -> bool:
        if str(record.record_id) in self.suppressed_ids:
            return True
        return record.is_deleted and not self.include_deleted

    def transform(self, record: MarcRecord, audit: AuditAccumulator,
                  item: Optional[ItemAccumulator]) -> None:
        item_fields = record.fields(self.item_tag)

        if item is not None:
            for field in item_fields:
                item.add_item(record.record_id, **{
                    attribute: field.get_subfields(code)[0]
                    for code, attribute in ITEM_SUBFIELDS.items()
                    if field.get_subfields(code)
                })

        audit.record(
            record.record_id,
            status=record.status,
            title=record.first_value("245", "a"),
            item_count=len(item_fields)
        )

        if self.strip_item_fields:
            record.delete_tag(self.item_tag)
