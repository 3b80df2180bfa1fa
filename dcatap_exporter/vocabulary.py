"""
Namespace table for the DCAT-AP catalog record.

The mapper never refers to module-level namespaces directly; it receives a
``Vocabulary`` so that a stricter national profile (or a corrected typing
predicate) can be swapped in without touching the mapping code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping

from rdflib import Graph, Namespace, URIRef


# ---- Fixed prefixes of the DCAT-AP export ----
DCAT = Namespace("http://www.w3.org/ns/dcat#")
DCT = Namespace("http://purl.org/dc/terms/")
RDFS = Namespace("http://www.w3.org/2000/01/rdf-schema#")
DCATAP = Namespace("http://data.europa.eu/r5r/")
VCARD = Namespace("http://www.w3.org/2006/vcard/ns#")
FOAF = Namespace("http://xmlns.com/foaf/0.1/")
SPDX = Namespace("http://spdx.org/rdf/terms#")

IANA_MEDIA_TYPES = "http://www.iana.org/assignments/media-types/"
ACCESS_RIGHT = "http://publications.europa.eu/resource/authority/access-right/"


@dataclass(frozen=True)
class Vocabulary:
    """Immutable set of namespaces and fixed URIs used by the mapper."""

    dcat: Namespace = DCAT
    dct: Namespace = DCT
    rdfs: Namespace = RDFS
    dcatap: Namespace = DCATAP
    vcard: Namespace = VCARD
    foaf: Namespace = FOAF
    spdx: Namespace = SPDX
    # Resources are typed with rdfs:type, not rdf:type. Inject a vocabulary with
    # RDF.type here once the target profile is corrected.
    type_predicate: URIRef = RDFS["type"]
    media_type_base: str = IANA_MEDIA_TYPES
    access_right_public: URIRef = URIRef(ACCESS_RIGHT + "PUBLIC")
    access_right_restricted: URIRef = URIRef(ACCESS_RIGHT + "RESTRICTED")
    extra_prefixes: Mapping[str, Namespace] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Stored as a read-only copy of the caller's mapping
        object.__setattr__(self, "extra_prefixes", MappingProxyType(dict(self.extra_prefixes)))

    def prefixes(self) -> Dict[str, Namespace]:
        table = {
            "dcat": self.dcat,
            "dct": self.dct,
            "rdfs": self.rdfs,
            "dcatap": self.dcatap,
            "vcard": self.vcard,
            "foaf": self.foaf,
            "spdx": self.spdx,
        }
        table.update(self.extra_prefixes)
        return table

    def bind(self, graph: Graph) -> Graph:
        """Bind every prefix of this vocabulary on ``graph``."""
        for prefix, namespace in self.prefixes().items():
            graph.bind(prefix, namespace, override=True, replace=True)
        return graph

    def media_type(self, content_type: str) -> URIRef:
        return URIRef(self.media_type_base + content_type)


DEFAULT_VOCABULARY = Vocabulary()
