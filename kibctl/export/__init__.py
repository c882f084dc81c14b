"""
Export package for kibctl.

The main components are:
- ExportDocument, the dashboard export payload
- Dependency scanning of visualization state for index patterns
- DashboardExporter, which merges the index patterns into the export
"""
from kibctl.export.document import ExportDocument
from kibctl.export.exporter import DashboardExporter
from kibctl.export.scanner import decode_embedded, scan_index_patterns

__all__ = [
    "ExportDocument",
    "DashboardExporter",
    "decode_embedded",
    "scan_index_patterns",
]
