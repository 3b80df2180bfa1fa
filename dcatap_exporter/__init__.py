"""DCAT-AP metadata export for Dataverse datasets."""

from .exporter import (
    DCATAPExporter,
    DictDataProvider,
    ExportDataProvider,
    ExportError,
    JsonFileDataProvider,
    OutputFormat,
    output_format,
)
from .mapper import build_catalog_graph
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

__all__ = [
    "DCATAPExporter",
    "DEFAULT_VOCABULARY",
    "DictDataProvider",
    "ExportDataProvider",
    "ExportError",
    "JsonFileDataProvider",
    "OutputFormat",
    "Vocabulary",
    "build_catalog_graph",
    "output_format",
]

__version__ = "0.1.0"
