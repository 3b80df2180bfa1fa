"""
Dataverse metadata field extraction.

Citation metadata arrives as a flat list of field objects::

    {"typeName": "title", "typeClass": "primitive", "multiple": false, "value": "..."}
    {"typeName": "author", "typeClass": "compound", "multiple": true, "value": [{...}, ...]}
    {"typeName": "language", "typeClass": "controlledVocabulary", "multiple": true, "value": ["English"]}

Each raw field is classified once into a small tagged variant and looked up by
name through a ``FieldIndex``. Lookups never raise: an absent or mis-shaped
field yields ``None`` or an empty list, and the caller picks the default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union


PRIMITIVE = "primitive"
COMPOUND = "compound"
CONTROLLED_VOCABULARY = "controlledVocabulary"


@dataclass(frozen=True)
class PrimitiveField:
    type_name: str
    # None when the raw field has no "value" key
    value: Optional[str]


@dataclass(frozen=True)
class MultiplePrimitiveField:
    type_name: str
    values: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CompoundField:
    type_name: str
    entries: List[Dict[str, Any]] = field(default_factory=list)
    multiple: bool = True


@dataclass(frozen=True)
class ControlledVocabularyField:
    type_name: str
    values: List[str] = field(default_factory=list)
    multiple: bool = False


MetadataField = Union[PrimitiveField, MultiplePrimitiveField, CompoundField, ControlledVocabularyField]


def _strings(value: Any) -> List[str]:
    """Coerce a JSON array into a list of strings; non-string items become ''."""
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else "" for item in value]


def parse_field(raw: Any) -> Optional[MetadataField]:
    """Classify one raw Dataverse field, or return None when it is unusable."""
    if not isinstance(raw, dict):
        return None
    type_name = raw.get("typeName")
    if not isinstance(type_name, str) or not type_name:
        return None

    type_class = raw.get("typeClass")
    multiple = raw.get("multiple") is True
    value = raw.get("value")

    if type_class == PRIMITIVE:
        if multiple:
            return MultiplePrimitiveField(type_name, _strings(value))
        if "value" not in raw:
            return PrimitiveField(type_name, None)
        return PrimitiveField(type_name, value if isinstance(value, str) else "")

    if type_class == COMPOUND:
        entries = value if isinstance(value, list) else [value]
        return CompoundField(
            type_name,
            [entry for entry in entries if isinstance(entry, dict)],
            multiple,
        )

    if type_class == CONTROLLED_VOCABULARY:
        if multiple:
            return ControlledVocabularyField(type_name, _strings(value), True)
        return ControlledVocabularyField(
            type_name, [value] if isinstance(value, str) else [""], False
        )

    logging.debug("Skipping field %s with unknown typeClass %r", type_name, type_class)
    return None


def sub_value(entry: Any, key: str) -> Optional[str]:
    """Read ``entry[key]["value"]`` from a compound field entry."""
    if not isinstance(entry, dict):
        return None
    sub = entry.get(key)
    if not isinstance(sub, dict):
        return None
    value = sub.get("value", "")
    return value if isinstance(value, str) else ""


class FieldIndex:
    """Name -> field mapping built once per export (first occurrence wins)."""

    def __init__(self, fields: Optional[Dict[str, MetadataField]] = None):
        self._fields: Dict[str, MetadataField] = fields or {}

    @classmethod
    def from_fields(cls, raw_fields: Optional[Iterable[Any]]) -> "FieldIndex":
        index: Dict[str, MetadataField] = {}
        if not isinstance(raw_fields, list):
            return cls(index)
        for raw in raw_fields:
            parsed = parse_field(raw)
            if parsed is None:
                continue
            if parsed.type_name in index:
                logging.debug("Ignoring duplicate field %s", parsed.type_name)
                continue
            index[parsed.type_name] = parsed
        return cls(index)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def get(self, type_name: str) -> Optional[MetadataField]:
        return self._fields.get(type_name)

    def primitive_value(self, type_name: str) -> Optional[str]:
        """Value of a single-valued primitive field."""
        found = self._fields.get(type_name)
        if isinstance(found, PrimitiveField):
            return found.value
        return None

    def primitive_value_list(self, type_name: str) -> List[str]:
        """Values of a primitive field, whether single or multiple."""
        found = self._fields.get(type_name)
        if isinstance(found, PrimitiveField):
            return [] if found.value is None else [found.value]
        if isinstance(found, MultiplePrimitiveField):
            return list(found.values)
        return []

    def multiple_value_list(self, type_name: str) -> List[str]:
        """Values of any field flagged ``multiple`` that holds strings."""
        found = self._fields.get(type_name)
        if isinstance(found, MultiplePrimitiveField):
            return list(found.values)
        if isinstance(found, ControlledVocabularyField) and found.multiple:
            return list(found.values)
        return []

    def compound_values(self, type_name: str) -> List[Dict[str, Any]]:
        found = self._fields.get(type_name)
        if isinstance(found, CompoundField):
            return list(found.entries)
        return []


# ---- Raw-list helpers, defaults applied here ----

def primitive_value(fields: Optional[List[Any]], type_name: str, default: str) -> str:
    value = FieldIndex.from_fields(fields).primitive_value(type_name)
    return default if value is None else value


def primitive_value_list(fields: Optional[List[Any]], type_name: str) -> List[str]:
    return FieldIndex.from_fields(fields).primitive_value_list(type_name)


def multiple_value_list(fields: Optional[List[Any]], type_name: str) -> List[str]:
    return FieldIndex.from_fields(fields).multiple_value_list(type_name)


def compound_values(fields: Optional[List[Any]], type_name: str) -> List[Dict[str, Any]]:
    return FieldIndex.from_fields(fields).compound_values(type_name)


def citation_fields(dataset_json: Dict[str, Any]) -> List[Any]:
    """Get the citation block's ``fields`` list, or [] when any level is missing."""
    dataset_version = dataset_json.get("datasetVersion") if isinstance(dataset_json, dict) else None
    if not isinstance(dataset_version, dict):
        return []
    metadata_blocks = dataset_version.get("metadataBlocks")
    if not isinstance(metadata_blocks, dict):
        return []
    citation_block = metadata_blocks.get("citation")
    if not isinstance(citation_block, dict):
        return []
    fields = citation_block.get("fields")
    return fields if isinstance(fields, list) else []
