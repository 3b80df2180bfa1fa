"""
DCAT-AP exporter as seen by the hosting repository.

The host asks for a few fixed registration values (format key, display name,
harvestability, media type) and then calls ``export_dataset`` with a data
provider and a writable binary stream. The stream belongs to the host: it is
flushed here but never closed.

Output serializations
---------------------
- ``RDF/XML`` (default, also what OAI-PMH harvesting needs)
- ``TURTLE``  (human readable, best for debugging)
- ``JSON-LD``
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

from rdflib import Graph

from .mapper import DEFAULT_DATAFILE_BASE_URL, build_catalog_graph
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary


FORMAT_NAME = "dcatap"
DISPLAY_NAME = "DCAT-AP"


@dataclass(frozen=True)
class OutputFormat:
    name: str
    rdflib_format: str
    media_type: str
    extension: str


RDF_XML = OutputFormat("RDF/XML", "pretty-xml", "application/xml", "xml")
# There is no registered text/turtle in the host's media type table
TURTLE = OutputFormat("TURTLE", "turtle", "text/plain", "ttl")
JSON_LD = OutputFormat("JSON-LD", "json-ld", "application/json", "json")

OUTPUT_FORMATS: Dict[str, OutputFormat] = {f.name: f for f in (RDF_XML, TURTLE, JSON_LD)}


def output_format(name: Optional[str]) -> OutputFormat:
    """Resolve an output language name; empty means the RDF/XML default."""
    if not name:
        return RDF_XML
    key = name.strip().upper().replace("_", "-")
    if key == "TTL":
        key = TURTLE.name
    try:
        return OUTPUT_FORMATS[key]
    except KeyError:
        raise ValueError(
            f"Unsupported output language: {name!r} (expected one of {', '.join(OUTPUT_FORMATS)})"
        ) from None


class ExportError(Exception):
    """Raised when an export fails for any reason other than missing metadata."""


# ------------------------------ Data providers ------------------------------

class ExportDataProvider(ABC):
    """Source of the dataset JSON handed to the exporter."""

    @abstractmethod
    def get_dataset_json(self) -> Dict[str, Any]:
        ...


class DictDataProvider(ExportDataProvider):
    def __init__(self, dataset_json: Dict[str, Any]):
        self.dataset_json = dataset_json

    def get_dataset_json(self) -> Dict[str, Any]:
        return self.dataset_json


class JsonFileDataProvider(ExportDataProvider):
    """Reads the dataset JSON from a file on every call."""

    def __init__(self, path: Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def get_dataset_json(self) -> Dict[str, Any]:
        return json.loads(self.path.read_text(encoding=self.encoding))


# ------------------------------ Exporter ------------------------------

class DCATAPExporter:
    """Creates DCAT-AP metadata from a Dataverse dataset.

    See https://semiceu.github.io/DCAT-AP/releases/3.0.0/#Dataset
    """

    format_name = FORMAT_NAME
    harvestable = True
    available_to_users = True
    xml_namespace = ""
    xml_schema_location = ""
    xml_schema_version = ""

    def __init__(
        self,
        output_lang: str = "",
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        datafile_base_url: str = DEFAULT_DATAFILE_BASE_URL,
    ):
        self.output_lang = output_lang
        self.vocabulary = vocabulary
        self.datafile_base_url = datafile_base_url

    @property
    def output_lang(self) -> str:
        return self._output_lang

    @output_lang.setter
    def output_lang(self, value: Optional[str]) -> None:
        # Unknown names raise here, not at export time
        self._output_format = output_format(value)
        self._output_lang = value or ""

    @property
    def output_format(self) -> OutputFormat:
        return self._output_format

    def display_name(self, locale: Optional[str] = None) -> str:
        return DISPLAY_NAME

    @property
    def media_type(self) -> str:
        return self._output_format.media_type

    def build_graph(self, dataset_json: Dict[str, Any]) -> Graph:
        return build_catalog_graph(
            dataset_json,
            vocabulary=self.vocabulary,
            datafile_base_url=self.datafile_base_url,
        )

    def serialize(self, graph: Graph) -> bytes:
        return graph.serialize(format=self._output_format.rdflib_format, encoding="utf-8")

    def export_dataset(self, data_provider: ExportDataProvider, output_stream: BinaryIO) -> None:
        """Write the dataset's DCAT-AP record to ``output_stream``.

        The whole serialization is produced before the first byte is written, so
        a failure never leaves a half-written record behind.
        """
        try:
            dataset_json = data_provider.get_dataset_json()
            graph = self.build_graph(dataset_json)
            payload = self.serialize(graph)
            output_stream.write(payload)
            output_stream.flush()
        except Exception as ex:
            logging.exception("Exception caught in DCAT-AP exporter")
            raise ExportError(f"Unknown exception caught during export: {ex}") from ex
        logging.info(
            "Exported %d triples as %s (%d bytes)",
            len(graph),
            self._output_format.name,
            len(payload),
        )
