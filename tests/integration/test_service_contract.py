"""
Integration tests: the web frontend rendering against a live data service.

The data service is served by Werkzeug on an ephemeral port; the frontend's
base URL is pointed at it (or at a closed port for the degraded scenarios).
"""

import socket
import threading
from unittest.mock import patch

import pytest
import requests
from werkzeug.serving import make_server

from portfolio_api.app import app as api_app
from portfolio_web import api_client
from portfolio_web.app import ABOUT_ERROR, HOME_ERROR, SERVICES_ERROR


@pytest.fixture(scope="module")
def api_url():
    server = make_server("127.0.0.1", 0, api_app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def closed_port_url():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"


class TestDataServiceOverHttp:

    def test_profile(self, api_url):
        resp = requests.get(f"{api_url}/api/profile", timeout=5)

        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Tosin Femi"
        assert len(body["technologies"]) == 8
        assert body["technologies"][0] == "Azure"
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_services(self, api_url):
        resp = requests.get(f"{api_url}/api/services", timeout=5)

        items = resp.json()["items"]
        assert len(items) == 4
        assert items[0]["slug"] == "cloud-architecture"
        assert items[3]["category"] == "Operations"

    def test_contact(self, api_url):
        resp = requests.post(
            f"{api_url}/api/contact",
            json={"name": "A", "email": "a@b", "company": "C", "message": "hi"},
            timeout=5,
        )

        assert resp.status_code == 202
        assert resp.text == '{"status":"accepted","message":"Thanks, your request has been received."}'

    def test_contact_not_json(self, api_url):
        resp = requests.post(f"{api_url}/api/contact", data="not json", timeout=5)

        assert resp.status_code == 400
        assert resp.text.startswith("invalid JSON")

    def test_preflight(self, api_url):
        resp = requests.options(f"{api_url}/api/contact", timeout=5)

        assert resp.status_code == 204
        assert resp.headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"
        assert resp.headers["Access-Control-Allow-Headers"] == "Content-Type"


class TestFrontendAgainstDataService:

    def test_pages_render_live_data(self, api_url, web_client):
        with patch.object(api_client, "API_BASE_URL", api_url):
            home = web_client.get("/").get_data(as_text=True)
            services = web_client.get("/services").get_data(as_text=True)
            about = web_client.get("/about").get_data(as_text=True)

        assert "Tosin Femi" in home
        assert "Argo CD" in home
        assert HOME_ERROR not in home
        assert 'id="observability-reliability"' in services
        assert SERVICES_ERROR not in services
        assert "Kubernetes (AKS/EKS)" in about
        assert ABOUT_ERROR not in about

    @pytest.mark.parametrize("path,banner", [
        ("/", HOME_ERROR),
        ("/services", SERVICES_ERROR),
        ("/about", ABOUT_ERROR),
    ])
    def test_data_service_stopped(self, closed_port_url, web_client, path, banner):
        with patch.object(api_client, "API_BASE_URL", closed_port_url):
            resp = web_client.get(path)

        assert resp.status_code == 200
        assert banner in resp.get_data(as_text=True)

    def test_contact_page_needs_no_backend(self, closed_port_url, web_client):
        with patch.object(api_client, "API_BASE_URL", closed_port_url):
            resp = web_client.get("/contact")

        assert resp.status_code == 200
        assert ABOUT_ERROR not in resp.get_data(as_text=True)
