import json

import httpx
import pytest

from kibctl.dashboards import DashboardService
from kibctl.errors import APIError, ConfigurationError
from kibctl.tests.conftest import saved_object, visualization


def test_import_posts_payload_with_force(kibana, client):
    payload = b'{"objects": [{"id": "d1", "type": "dashboard"}]}'

    body = DashboardService(client).import_dashboard(payload)

    request = kibana.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/kibana/dashboards/import"
    assert request.url.params["force"] == "true"
    assert request.content == payload
    assert request.headers["kbn-xsrf"] == "true"
    assert json.loads(body) == {"objects": []}


def test_import_failure_carries_status_and_body(kibana, client):
    kibana.overrides["/api/kibana/dashboards/import"] = lambda r: httpx.Response(
        400, text='{"message":"bad payload"}'
    )

    with pytest.raises(APIError) as excinfo:
        DashboardService(client).import_dashboard(b"{}")
    assert excinfo.value.status_code == 400
    assert "bad payload" in str(excinfo.value)


def test_import_rejects_empty_payload(kibana, client):
    with pytest.raises(ConfigurationError):
        DashboardService(client).import_dashboard(b"  \n")
    assert kibana.requests == []


def test_list_returns_every_match(kibana, client):
    kibana.find[("dashboard", "Sal")] = [saved_object("s1", "Sales"), saved_object("s2", "Sales EU")]

    records = DashboardService(client).list_dashboards("Sal")

    assert [(r.id, r.title) for r in records] == [("s1", "Sales"), ("s2", "Sales EU")]


def test_list_with_no_match_is_not_an_error(kibana, client):
    assert DashboardService(client).list_dashboards("zzz") == []


def test_export_dashboard_delegates_to_exporter(kibana, client):
    kibana.find[("dashboard", '"Ops"')] = [saved_object("ops", "Ops")]
    kibana.exports["ops"] = {"objects": [visualization("v", "ops-*")]}
    kibana.find[("index-pattern", '"ops-*"')] = [saved_object("ip", "ops-*", "index-pattern")]

    document = json.loads(DashboardService(client).export_dashboard("Ops"))

    assert [o["id"] for o in document["objects"]] == ["v", "ip"]
