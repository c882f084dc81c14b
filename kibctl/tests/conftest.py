import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from kibctl.client.http_client import KibanaHTTPClient

HOST = "http://kibana.test:5601"


def saved_object(object_id: str, title: str, object_type: str = "dashboard") -> Dict[str, Any]:
    return {"id": object_id, "type": object_type, "attributes": {"title": title}}


def visualization(object_id: str, index_pattern: Optional[str] = None) -> Dict[str, Any]:
    params: Dict[str, Any] = {"interval": "auto"}
    if index_pattern is not None:
        params["index_pattern"] = index_pattern
    vis_state = {"title": object_id, "type": "timelion", "params": params}
    return {
        "id": object_id,
        "type": "visualization",
        "attributes": {"title": object_id, "visState": json.dumps(vis_state)},
    }


class FakeKibana:
    """Stub Kibana server for httpx.MockTransport.

    ``find`` maps ``(type, search)`` to the list of saved objects returned;
    ``exports`` maps dashboard ids to export documents (dict or raw text).
    """

    def __init__(self) -> None:
        self.find: Dict[tuple, List[Dict[str, Any]]] = {}
        self.exports: Dict[str, Any] = {}
        self.overrides: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        override = self.overrides.get(request.url.path)
        if override is not None:
            return override(request)
        return self.route(request)

    def route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/saved_objects/_find":
            key = (request.url.params.get("type"), request.url.params.get("search"))
            return httpx.Response(200, json={"page": 1, "saved_objects": self.find.get(key, [])})
        if path == "/api/kibana/dashboards/export":
            document = self.exports.get(request.url.params.get("dashboard"))
            if document is None:
                return httpx.Response(404, json={"statusCode": 404, "message": "Not Found"})
            if isinstance(document, str):
                return httpx.Response(200, text=document)
            return httpx.Response(200, json=document)
        if path == "/api/kibana/dashboards/import":
            return httpx.Response(200, json={"objects": []})
        return httpx.Response(404, text="no route")

    def searched(self, object_type: str) -> List[str]:
        return [
            r.url.params.get("search")
            for r in self.requests
            if r.url.path == "/api/saved_objects/_find" and r.url.params.get("type") == object_type
        ]


@pytest.fixture
def kibana() -> FakeKibana:
    return FakeKibana()


@pytest.fixture
def client(kibana: FakeKibana):
    with KibanaHTTPClient(HOST, auth=("elastic", "changeme"), transport=httpx.MockTransport(kibana)) as c:
        yield c
