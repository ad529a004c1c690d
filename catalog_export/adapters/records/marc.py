"""
MARC Record Adapter

Wraps pymarc records so the export pipeline can serialize them to every
supported output type and prune tags without knowing about pymarc.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from pymarc import Field, Indicators, Record, Subfield, record_to_xml

from ...core.ports import DocumentSinkPort

DEFAULT_LEADER = "00000cam a2200000 a 4500"
DEFAULT_AUTH_LEADER = "00000nz  a2200000n  4500"

ControlFieldSpec = Tuple[str, str]
DataFieldSpec = Tuple[str, str, str, Sequence[Tuple[str, str]]]
FieldSpec = Union[ControlFieldSpec, DataFieldSpec]


class MarcRecord:
    """Catalog record backed by a pymarc.Record"""

    def __init__(self, record: Record, record_id: Any = None):
        self.record = record
        self._record_id = record_id

    def __repr__(self) -> str:
        return f"MarcRecord(record_id={self.record_id!r}, tags={self.tags()!r})"

    @property
    def record_id(self) -> Any:
        if self._record_id is not None:
            return self._record_id
        return self.control_value("001")

    @property
    def leader(self) -> str:
        return str(self.record.leader)

    @property
    def status(self) -> str:
        """Record status from leader position 05 ('d' = deleted)"""
        return self.leader[5]

    @property
    def is_deleted(self) -> bool:
        return self.status == "d"

    # Field access

    def tags(self) -> List[str]:
        return [field.tag for field in self.record.get_fields()]

    def has_tag(self, tag: str) -> bool:
        return bool(self.record.get_fields(tag))

    def fields(self, *tags: str) -> List[Field]:
        return self.record.get_fields(*tags)

    def control_value(self, tag: str) -> Optional[str]:
        for field in self.record.get_fields(tag):
            if field.is_control_field():
                return field.data
        return None

    def first_value(self, tag: str, code: str) -> Optional[str]:
        for field in self.record.get_fields(tag):
            if field.is_control_field():
                continue
            values = field.get_subfields(code)
            if values:
                return values[0]
        return None

    # Mutation

    def delete_tag(self, tag: str) -> None:
        self.record.remove_fields(tag)

    def add_control_field(self, tag: str, data: str) -> None:
        self.record.add_ordered_field(Field(tag=tag, data=data))

    def add_data_field(self, tag: str, ind1: str, ind2: str, subfields: Iterable[Tuple[str, str]]) -> None:
        self.record.add_ordered_field(Field(
            tag=tag,
            indicators=Indicators(ind1, ind2),
            subfields=[Subfield(code=code, value=value) for code, value in subfields]
        ))

    # Serializers, one per output type

    def to_xml(self) -> str:
        return record_to_xml(self.record).decode("utf-8") + "\n"

    def to_json(self) -> str:
        return self.record.as_json() + "\n"

    def to_mrc(self) -> str:
        return self.record.as_marc().decode("utf-8")

    def to_mrk(self) -> str:
        return str(self.record) + "\n\n"

    def to_document(self) -> Dict[str, Any]:
        document = self.record.as_dict()
        document["_id"] = self.record_id
        return document

    def to_mongo(self, sink: DocumentSinkPort) -> Any:
        return sink.insert_one(self.to_document())


def build_field(spec: FieldSpec) -> Field:
    """Build a pymarc field from (tag, data) or (tag, ind1, ind2, [(code, value), ...])"""
    if len(spec) == 2:
        tag, data = spec
        return Field(tag=tag, data=data)
    tag, ind1, ind2, subfields = spec
    return Field(
        tag=tag,
        indicators=Indicators(ind1, ind2),
        subfields=[Subfield(code=code, value=value) for code, value in subfields]
    )


def build_record(record_id: Any, fields: Iterable[FieldSpec] = (), leader: str = DEFAULT_LEADER) -> MarcRecord:
    """
    Build a MarcRecord with a 001 control number and the given fields.

    Args:
        record_id: Identifier, also written to the 001 field
        fields: Field specs, see build_field
        leader: 24 character MARC leader

    Returns:
        MarcRecord wrapping a UTF-8 pymarc record
    """
    record = Record(leader=leader, force_utf8=True)
    record.add_field(Field(tag="001", data=str(record_id)))
    for spec in fields:
        record.add_field(build_field(spec))
    return MarcRecord(record, record_id)
