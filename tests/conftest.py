"""Shared fixtures: Flask test clients for both services."""

import pytest

from portfolio_api.app import app as api_app
from portfolio_web.app import app as web_app


@pytest.fixture
def api_client():
    api_app.config["TESTING"] = True
    with api_app.test_client() as client:
        yield client


@pytest.fixture
def web_client():
    web_app.config["TESTING"] = True
    with web_app.test_client() as client:
        yield client
