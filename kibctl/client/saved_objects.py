"""
Saved-object search for kibctl.

Wraps ``GET /api/saved_objects/_find``, which matches saved objects of one
type whose title contains a search pattern. Results are read from a single
page of ``PER_PAGE`` entries; result sets are assumed to fit in it.
"""
import json
from typing import Any, List, Optional

import structlog
from pydantic import ValidationError

from kibctl.client.http_client import KibanaHTTPClient
from kibctl.errors import CardinalityError, ParseError
from kibctl.models import DashboardRecord
from kibctl.raw_json import array_elements

FIND_PATH = "/api/saved_objects/_find"
PER_PAGE = 200


def quote_phrase(name: str) -> str:
    """Quote a title so the server searches it as an exact phrase."""
    return f'"{name}"'


class SavedObjectSearch:
    """
    Title search over Kibana saved objects.

    Args:
        client: HTTP gateway to the Kibana API.
        logger: Optional structlog logger used for diagnostics.
    """

    def __init__(self, client: KibanaHTTPClient, logger: Optional[Any] = None) -> None:
        self._client = client
        self._log = logger or structlog.get_logger(__name__)

    def find_raw(self, object_type: str, pattern: str) -> List[str]:
        """
        Search saved objects and return each match as verbatim JSON text.

        Args:
            object_type: Saved object type (``dashboard``, ``index-pattern``...)
            pattern: Title search pattern; empty matches every object

        Returns:
            List[str]: JSON text of each element of ``saved_objects``,
            in server order
        """
        params = {
            "type": object_type,
            "per_page": PER_PAGE,
            "search_fields": "title",
        }
        if pattern:
            params["search"] = pattern

        response = self._client.get(
            FIND_PATH,
            f"search {object_type} name {pattern}",
            params=params,
        )
        try:
            elements = array_elements(response.text, "saved_objects")
        except ValueError as e:
            raise ParseError(f"{object_type} search response", str(e)) from e

        self._log.debug(
            "Saved object search completed",
            object_type=object_type,
            pattern=pattern,
            matches=len(elements),
        )
        return elements

    def search(self, object_type: str, pattern: str) -> List[DashboardRecord]:
        """
        Search saved objects and parse each match into a record.

        A single element that cannot be parsed aborts the whole search.

        Args:
            object_type: Saved object type
            pattern: Title search pattern

        Returns:
            List[DashboardRecord]: Matching records, in server order
        """
        records = []
        for raw in self.find_raw(object_type, pattern):
            try:
                records.append(DashboardRecord.from_saved_object(json.loads(raw)))
            except (ValueError, ValidationError) as e:
                raise ParseError(f"{object_type} definition", str(e)) from e
        return records

    def find_one(self, object_type: str, name: str) -> DashboardRecord:
        """
        Look up the single saved object whose title matches ``name``.

        Raises:
            CardinalityError: If zero or several objects match
        """
        records = self.search(object_type, quote_phrase(name))
        if len(records) != 1:
            raise CardinalityError(object_type, name, len(records))
        return records[0]

    def find_one_raw(self, object_type: str, name: str) -> str:
        """
        Look up the single saved object whose title matches ``name``.

        Returns:
            str: The saved object's JSON text as sent by the server

        Raises:
            CardinalityError: If zero or several objects match
        """
        elements = self.find_raw(object_type, quote_phrase(name))
        if len(elements) != 1:
            raise CardinalityError(object_type, name, len(elements))
        return elements[0]
