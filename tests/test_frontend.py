import json
from unittest import mock

import pytest
import requests

from ioio.config import SiteConfig
from ioio.frontend import create_site_app


@pytest.fixture
def site_dir(tmp_path):
    (tmp_path / "index.html").write_text("<h1>home</h1>")
    (tmp_path / "main.js").write_text("console.log('hi');")
    return tmp_path


@pytest.fixture
def site(site_dir):
    config = SiteConfig(secret_key="test", backend_url="http://backend:5001")
    app = create_site_app(config, site_dir=str(site_dir), client=mock.MagicMock())
    app.config["TESTING"] = True
    return app.test_client()


def upstream(status=200, content=b'{"success": true}', headers=None):
    resp = mock.MagicMock()
    resp.status_code = status
    resp.content = content
    resp.headers = headers or {"Content-Type": "application/json"}
    return resp


def test_serves_static_file(site):
    response = site.get("/main.js")
    assert response.status_code == 200
    assert b"console.log" in response.data


def test_unknown_route_falls_back_to_entry_page(site):
    for path in ("/", "/about/team", "/missing.css"):
        response = site.get(path)
        assert response.status_code == 200
        assert b"<h1>home</h1>" in response.data


def test_proxy_forwards_request(site):
    with mock.patch("ioio.frontend.requests.request", return_value=upstream(
            headers={"Content-Type": "application/json", "Connection": "keep-alive",
                     "Content-Length": "17"})) as request:
        response = site.post("/api/properties?source=web", json={"name": "A"},
                             headers={"Accept": "application/json"})

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    assert "Connection" not in response.headers

    args, kwargs = request.call_args
    assert args == ("POST", "http://backend:5001/api/properties?source=web")
    assert json.loads(kwargs["data"]) == {"name": "A"}
    assert kwargs["headers"]["Accept"] == "application/json"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert "Host" not in kwargs["headers"]


def test_proxy_passes_status_through(site):
    body = b'{"success": false, "message": "Missing required fields", "missingFields": ["age"]}'
    with mock.patch("ioio.frontend.requests.request", return_value=upstream(status=400, content=body)):
        response = site.post("/api/service", json={})

    assert response.status_code == 400
    assert response.get_json()["missingFields"] == ["age"]


def test_proxy_delete(site):
    with mock.patch("ioio.frontend.requests.request", return_value=upstream()) as request:
        site.delete("/api/service/3")
    assert request.call_args[0] == ("DELETE", "http://backend:5001/api/service/3")


def test_proxy_backend_down(site):
    with mock.patch("ioio.frontend.requests.request",
                    side_effect=requests.ConnectionError("refused")):
        response = site.get("/api/health")

    assert response.status_code == 502
    body = response.get_json()
    assert body["success"] is False
    assert body["message"] == "Backend unavailable"


def test_proxy_keeps_repeated_query_keys(site):
    with mock.patch("ioio.frontend.requests.request", return_value=upstream()) as request:
        site.get("/api/properties?tag=a&tag=b")
    assert request.call_args[0] == ("GET", "http://backend:5001/api/properties?tag=a&tag=b")
