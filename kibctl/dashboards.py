"""
Dashboard operations: import, list and export.

Each operation receives its HTTP gateway explicitly. Import and list are a
single round trip; export is delegated to ``DashboardExporter``.
"""
from typing import Any, List, Optional

import structlog

from kibctl.client.http_client import KibanaHTTPClient
from kibctl.client.saved_objects import SavedObjectSearch
from kibctl.errors import ConfigurationError
from kibctl.export.exporter import DASHBOARD_TYPE, DashboardExporter
from kibctl.models import DashboardRecord

IMPORT_PATH = "/api/kibana/dashboards/import"


class DashboardService:
    """
    Service for Kibana dashboard operations.

    Args:
        client: HTTP gateway to the Kibana API.
        logger: Optional structlog logger used for diagnostics.
    """

    def __init__(self, client: KibanaHTTPClient, logger: Optional[Any] = None) -> None:
        self._client = client
        self._log = logger or structlog.get_logger(__name__)
        self._search = SavedObjectSearch(client, logger=self._log)
        self._exporter = DashboardExporter(client, search=self._search, logger=self._log)

    def import_dashboard(self, payload: bytes) -> str:
        """
        Import a dashboard definition, overwriting a dashboard with the same id.

        Args:
            payload: Dashboard import JSON, sent verbatim

        Returns:
            str: The server's response body
        """
        if not payload.strip():
            raise ConfigurationError("dashboard import payload is empty")
        self._log.info("Importing dashboard", payload=payload.decode("utf-8", "replace"))
        response = self._client.post(
            IMPORT_PATH,
            "import dashboard",
            content=payload,
            params={"force": "true"},
        )
        self._log.info("Dashboard imported", response=response.text)
        return response.text

    def list_dashboards(self, pattern: str = "") -> List[DashboardRecord]:
        """List dashboards whose title matches ``pattern``; any count is valid."""
        return self._search.search(DASHBOARD_TYPE, pattern)

    def export_dashboard(self, name: str) -> bytes:
        """Export the dashboard titled ``name`` with its index patterns."""
        return self._exporter.export(name)
