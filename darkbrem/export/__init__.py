"""Export — event library, cross-section table and configuration files."""

from darkbrem.export.csv_export import CsvExporter
from darkbrem.export.json_export import JsonExporter

__all__ = [
    "CsvExporter",
    "JsonExporter",
]
