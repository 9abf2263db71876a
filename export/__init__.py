"""File exporters for calendar events."""

from export.exporters import CsvExporter, Exporter, IcsExporter, exporter_for

__all__ = ["CsvExporter", "Exporter", "IcsExporter", "exporter_for"]
