"""
Dataverse dataset JSON -> DCAT-AP RDF graph.

One call of ``build_catalog_graph`` maps one dataset export document onto a
fresh rdflib ``Graph``:

- the dataset itself (dcat:Dataset), keyed by its persistent URL;
- one dct:creator per author, one dcat:contactPoint for the first contact;
- one dcat:Distribution per file, carrying rights, size, media type,
  checksum and the dataset licence.

Missing or malformed metadata is never an error here. Mandatory DCAT-AP
properties fall back to fixed placeholder literals and optional ones are
left out, so any document still yields a valid (if thin) catalog record.

Properties deliberately not emitted: dct:accessRights, dcat:theme,
dcatap:applicableLegislation, dct:publisher, dct:provenance and dct:subject.
They need either installation-specific configuration or a subject-to-theme
mapping that does not exist yet.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as dateparser
from rdflib import BNode, Graph, Literal, URIRef
from rdflib.namespace import XSD

from .checksum import spdx_checksum_algorithm
from .fields import FieldIndex, citation_fields, sub_value
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary


DEFAULT_DATAFILE_BASE_URL = "http://localhost:8080"

NO_TITLE = "no-title"
NO_DESCRIPTION = "no-description"
NO_PUBLICATION_DATE = "no-publication-date"
NO_LAST_UPDATE_TIME = "no-last-update-time"
NO_FILENAME = "no-filename"
NO_FILE_DESCRIPTION = "No specific description available"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_CHECKSUM_TYPE = "MD5"

LANG = "en"

Node = Union[URIRef, BNode]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _string(obj: Dict[str, Any], key: str, default: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else default


def _integer(obj: Dict[str, Any], key: str) -> Optional[int]:
    value = obj.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


# ------------------------------ Value conversions ------------------------------

def version_label(major: int, minor: int) -> str:
    """Version label as printed in the Dataverse citation, e.g. 'V1.2'."""
    return f"V{major}.{minor}"


def iso_date(date_time: str) -> str:
    """Reduce an ISO-8601 date-time to its date; unparseable input comes back unchanged."""
    try:
        return dateparser.isoparse(date_time).date().isoformat()
    except (ValueError, TypeError, OverflowError):
        logging.warning("Failed to parse lastUpdateTime: %s", date_time)
        return date_time


def checked_uri(value: str) -> Optional[URIRef]:
    """URIRef for ``value``, or None when no serializer could write it as an IRI."""
    uri = URIRef(value.strip())
    try:
        # Turtle and N-Triples refuse IRIs containing spaces, quotes, braces or angle brackets
        uri.n3()
    except Exception:
        logging.warning("Not a valid IRI, falling back to a literal: %r", value)
        return None
    return uri


def first_description(index: FieldIndex) -> Optional[str]:
    """Text of the first dsDescription entry that carries a dsDescriptionValue."""
    for entry in index.compound_values("dsDescription"):
        if isinstance(entry.get("dsDescriptionValue"), dict):
            value = sub_value(entry, "dsDescriptionValue")
            return value if value else None
    return None


# ------------------------------ Sub-mappers ------------------------------

def build_contact_point(
    graph: Graph,
    contacts: List[Dict[str, Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Optional[BNode]:
    """Build a vcard contact from the first datasetContact entry; None when there is none."""
    if not contacts:
        return None

    contact = BNode()
    first = contacts[0]
    v = vocabulary.vcard

    name = sub_value(first, "datasetContactName")
    if name is not None:
        graph.add((contact, v["fn"], Literal(name, lang=LANG)))

    email = sub_value(first, "datasetContactEmail")
    if email:
        mailto = "mailto:" + email.strip()
        graph.add((contact, v["hasEmail"], checked_uri(mailto) or Literal(mailto)))

    affiliation = sub_value(first, "datasetContactAffiliation")
    if affiliation:
        graph.add((contact, v["organization-name"], Literal(affiliation, lang=LANG)))

    return contact


def build_creator(
    graph: Graph,
    author: Dict[str, Any],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> BNode:
    """Build a foaf:Person for one author entry."""
    creator = BNode()
    # Organisational authors are typed as persons too.
    graph.add((creator, vocabulary.type_predicate, vocabulary.foaf["Person"]))

    name = sub_value(author, "authorName")
    if name is not None:
        graph.add((creator, vocabulary.foaf["name"], Literal(name, lang=LANG)))

    affiliation = sub_value(author, "authorAffiliation")
    if affiliation:
        graph.add((creator, vocabulary.vcard["organization-name"], Literal(affiliation, lang=LANG)))

    return creator


def build_checksum(
    graph: Graph,
    checksum: Dict[str, Any],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Optional[BNode]:
    """Build an spdx:Checksum node; None for unknown algorithms or empty values."""
    value = _string(checksum, "value", "")
    checksum_type = _string(checksum, "type", DEFAULT_CHECKSUM_TYPE)
    algorithm = spdx_checksum_algorithm(checksum_type)
    if not algorithm or not value:
        if value and not algorithm:
            logging.debug("No SPDX algorithm for checksum type %r; omitting checksum", checksum_type)
        return None

    node = BNode()
    graph.add((node, vocabulary.spdx["algorithm"], vocabulary.spdx[algorithm]))
    graph.add((node, vocabulary.spdx["checksumValue"], Literal(value)))
    return node


def license_term(license_obj: Optional[Dict[str, Any]]) -> Optional[Union[URIRef, Literal]]:
    """Dataset licence as a URI when available, else as a name literal."""
    if not isinstance(license_obj, dict):
        return None
    uri = _string(license_obj, "uri", "")
    name = _string(license_obj, "name", "")
    if uri:
        licence = checked_uri(uri)
        if licence is not None:
            return licence
        if not name:
            return Literal(uri)
    if name:
        return Literal(name, lang=LANG)
    return None


def distribution_uri(file_id: int, datafile_base_url: str = DEFAULT_DATAFILE_BASE_URL) -> URIRef:
    return URIRef(f"{datafile_base_url.rstrip('/')}/api/access/datafile/{file_id}")


def build_distribution(
    graph: Graph,
    file_entry: Dict[str, Any],
    license_obj: Optional[Dict[str, Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    datafile_base_url: str = DEFAULT_DATAFILE_BASE_URL,
) -> URIRef:
    """Build a dcat:Distribution for one file of the dataset version.

    Dataverse only has a dataset-level licence, so ``license_obj`` is the
    dataset's licence repeated on every file.
    """
    data_file = _as_dict(file_entry.get("dataFile"))
    dcat, dct = vocabulary.dcat, vocabulary.dct

    file_id = _integer(data_file, "id")
    distribution = distribution_uri(file_id if file_id is not None else 0, datafile_base_url)
    graph.add((distribution, vocabulary.type_predicate, dcat["Distribution"]))

    graph.add((distribution, dct["title"], Literal(_string(data_file, "filename", NO_FILENAME))))

    if file_entry.get("restricted") is True:
        graph.add((distribution, dct["rights"], vocabulary.access_right_restricted))
    else:
        graph.add((distribution, dct["rights"], vocabulary.access_right_public))

    filesize = _integer(data_file, "filesize")
    graph.add((distribution, dcat["byteSize"], Literal(filesize or 0, datatype=XSD.integer)))

    description = _string(data_file, "description", NO_FILE_DESCRIPTION)
    if description:
        graph.add((distribution, dct["description"], Literal(description, lang=LANG)))

    # Content types with parameters, e.g. "text/plain; charset=US-ASCII", stay literals
    content_type = _string(data_file, "contentType", DEFAULT_CONTENT_TYPE)
    media_type = checked_uri(vocabulary.media_type(content_type))
    graph.add((distribution, dcat["mediaType"], media_type or Literal(content_type)))

    checksum_obj = data_file.get("checksum")
    if isinstance(checksum_obj, dict):
        checksum = build_checksum(graph, checksum_obj, vocabulary)
        if checksum is not None:
            graph.add((distribution, vocabulary.spdx["checksum"], checksum))

    licence = license_term(license_obj)
    if licence is not None:
        graph.add((distribution, dct["license"], licence))

    return distribution


# ------------------------------ Dataset mapping ------------------------------

def build_catalog_graph(
    dataset_json: Dict[str, Any],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    datafile_base_url: str = DEFAULT_DATAFILE_BASE_URL,
) -> Graph:
    """Map a Dataverse dataset export document onto a DCAT-AP graph."""
    dataset_json = _as_dict(dataset_json)
    graph = vocabulary.bind(Graph())
    dcat, dct = vocabulary.dcat, vocabulary.dct

    persistent_url = _string(dataset_json, "persistentUrl", "")
    dataset_uri = checked_uri(persistent_url) if persistent_url else None
    dataset: Node = dataset_uri if dataset_uri is not None else BNode()
    graph.add((dataset, vocabulary.type_predicate, dcat["Dataset"]))

    if dataset_uri is not None:
        graph.add((dataset, dcat["landingPage"], dataset_uri))
        graph.add((dataset, dct["identifier"], Literal(persistent_url)))
    elif persistent_url:
        logging.warning("Dataset persistentUrl is not a valid IRI; exporting it as a blank node")
        graph.add((dataset, dct["identifier"], Literal(persistent_url)))
    else:
        logging.warning("Dataset has no persistentUrl; exporting it as a blank node")
        identifier = _string(dataset_json, "identifier", "")
        if identifier:
            graph.add((dataset, dct["identifier"], Literal(identifier)))

    dataset_version = _as_dict(dataset_json.get("datasetVersion"))

    major = _integer(dataset_version, "versionNumber")
    if major is not None:
        minor = _integer(dataset_version, "versionMinorNumber") or 0
        graph.add((dataset, dcat["version"], Literal(version_label(major, minor))))
    else:
        logging.debug("Dataset version has no versionNumber (draft); skipping dcat:version")

    index = FieldIndex.from_fields(citation_fields(dataset_json))

    # Title and description are mandatory in DCAT-AP
    title = index.primitive_value("title")
    graph.add((dataset, dct["title"], Literal(title or NO_TITLE, lang=LANG)))

    description = first_description(index)
    graph.add((dataset, dct["description"], Literal(description or NO_DESCRIPTION, lang=LANG)))

    graph.add((dataset, dct["issued"], Literal(_string(dataset_version, "publicationDate", NO_PUBLICATION_DATE))))

    last_update = _string(dataset_version, "lastUpdateTime", NO_LAST_UPDATE_TIME)
    graph.add((dataset, dct["modified"], Literal(iso_date(last_update))))

    contact = build_contact_point(graph, index.compound_values("datasetContact"), vocabulary)
    if contact is not None:
        graph.add((dataset, dcat["contactPoint"], contact))

    for author in index.compound_values("author"):
        graph.add((dataset, dct["creator"], build_creator(graph, author, vocabulary)))

    # Language names are passed through as-is, no mapping to an authority table
    for language in index.multiple_value_list("language"):
        graph.add((dataset, dct["language"], Literal(language, lang=LANG)))

    for keyword in index.compound_values("keyword"):
        value = sub_value(keyword, "keywordValue")
        if value:
            graph.add((dataset, dcat["keyword"], Literal(value, lang=LANG)))

    license_obj = dataset_version.get("license")
    files = _as_list(dataset_version.get("files"))
    for file_entry in files:
        if not isinstance(file_entry, dict):
            continue
        distribution = build_distribution(
            graph, file_entry, license_obj, vocabulary, datafile_base_url
        )
        # Files have no landing page of their own
        if dataset_uri is not None:
            graph.add((distribution, dcat["accessURL"], dataset_uri))
        graph.add((dataset, dcat["distribution"], distribution))

    logging.debug(
        "Mapped dataset %s: %d triples, %d distributions",
        dataset_uri or "<blank>",
        len(graph),
        len(files),
    )
    return graph
