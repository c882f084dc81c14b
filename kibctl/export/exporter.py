"""
Dashboard export with index-pattern dependencies.

Kibana's dashboard export endpoint returns the dashboard and its
visualizations but not the index patterns those visualizations read from.
``DashboardExporter`` looks the dashboard up by title, fetches its export,
finds the index patterns named in the visualizations' state and appends each
one's saved object to the document, so the result can be imported into
another Kibana without missing dependencies.

Any failure aborts the export; no partial document is ever returned.
"""
from typing import Any, List, Optional

import structlog

from kibctl.client.http_client import KibanaHTTPClient
from kibctl.client.saved_objects import SavedObjectSearch
from kibctl.export.document import ExportDocument
from kibctl.export.scanner import scan_index_patterns

EXPORT_PATH = "/api/kibana/dashboards/export"
DASHBOARD_TYPE = "dashboard"
INDEX_PATTERN_TYPE = "index-pattern"


class DashboardExporter:
    """
    Builds self-contained dashboard exports.

    Args:
        client: HTTP gateway to the Kibana API.
        search: Saved-object search; built on ``client`` when omitted.
        logger: Optional structlog logger used for diagnostics.
    """

    def __init__(
        self,
        client: KibanaHTTPClient,
        search: Optional[SavedObjectSearch] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self._client = client
        self._log = logger or structlog.get_logger(__name__)
        self._search = search or SavedObjectSearch(client, logger=self._log)

    def fetch_export(self, dashboard_id: str) -> ExportDocument:
        """Fetch the server's export document for one dashboard id."""
        response = self._client.get(
            EXPORT_PATH,
            f"retrieve dashboard id {dashboard_id}",
            params={"dashboard": dashboard_id},
        )
        return ExportDocument.from_bytes(response.content)

    def resolve_index_patterns(self, names) -> List[str]:
        """
        Fetch the saved object of each named index pattern.

        Lookups run one after another, in sorted name order, and the first
        failure is raised.

        Returns:
            List[str]: The index patterns' JSON texts, as sent by the server
        """
        records = []
        for name in sorted(names):
            records.append(self._search.find_one_raw(INDEX_PATTERN_TYPE, name))
            self._log.info("Adding index-pattern", index_pattern=name)
        return records

    def export(self, name: str) -> bytes:
        """
        Export the dashboard titled ``name`` with its index patterns.

        Args:
            name: Dashboard title, looked up as an exact phrase

        Returns:
            bytes: The export document with one ``index-pattern`` object
            appended per distinct index pattern referenced

        Raises:
            CardinalityError: If the dashboard or an index pattern does not
                match exactly one saved object
            APIError: If the server rejects a request
            TransportError: If a request cannot complete
            ParseError: If a server payload is malformed
        """
        self._log.info("Searching dashboards", name=name)
        dashboard = self._search.find_one(DASHBOARD_TYPE, name)
        self._log.info("Found dashboard", dashboard_id=dashboard.id)

        self._log.info("Retrieving dashboard export", dashboard_id=dashboard.id)
        document = self.fetch_export(dashboard.id)

        names = scan_index_patterns(document)
        self._log.info(
            "Index-pattern dependencies found",
            count=len(names),
            index_patterns=sorted(names),
        )

        document.append_objects(self.resolve_index_patterns(names))
        return document.to_bytes()
