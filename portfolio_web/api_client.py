# portfolio_web/api_client.py
import json
import os
import sys
import threading
import time
from concurrent.futures import Future, wait
from datetime import datetime, timezone

import requests

# Base URL of the data service on the shared container network
API_BASE_URL = os.environ.get("PORTFOLIO_API_URL", "http://api:8081")

PROFILE_PATH = "/api/profile"
SERVICES_PATH = "/api/services"

# total budget per backend call, connect + write + body read
FETCH_TIMEOUT = 5.0
_CHUNK_SIZE = 8192

PROFILE_TEXT_FIELDS = ("name", "title", "tagline", "summary", "location")
SERVICE_TEXT_FIELDS = ("slug", "name", "description", "category")

http_session = requests.Session()


def log_event(event, level="INFO"):
    ts = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    print(f"[WEB {ts}] [{level}] {event}", file=sys.stderr, flush=True)


class FetchTimeout(requests.Timeout):
    """Backend call did not complete inside FETCH_TIMEOUT."""


# ----------------------------------------------------------------------
# DECODING
# ----------------------------------------------------------------------
def _text(record, field, kind):
    value = record.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{kind} field '{field}' is {type(value).__name__}, expected string")
    return value


def decode_profile(data):
    """Shape a decoded payload into a profile; null fields become empty, wrong types raise ValueError."""
    if not isinstance(data, dict):
        raise ValueError(f"profile payload is {type(data).__name__}, expected object")
    profile = {field: _text(data, field, "profile") for field in PROFILE_TEXT_FIELDS}

    technologies = data.get("technologies")
    if technologies is None:
        technologies = []
    if not isinstance(technologies, list) or not all(isinstance(t, str) for t in technologies):
        raise ValueError("profile field 'technologies' is not a list of strings")
    profile["technologies"] = technologies
    return profile


def decode_services(data):
    if not isinstance(data, dict):
        raise ValueError(f"services payload is {type(data).__name__}, expected object")
    items = data.get("items")
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError("services payload 'items' is not a list")

    services = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"service entry is {type(item).__name__}, expected object")
        services.append({field: _text(item, field, "service") for field in SERVICE_TEXT_FIELDS})
    return services


# ----------------------------------------------------------------------
# FETCHERS
# ----------------------------------------------------------------------
def _get_json(path, deadline):
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise FetchTimeout(f"no time left to request {path}")

    resp = http_session.get(f"{API_BASE_URL}{path}", timeout=remaining, stream=True)
    try:
        resp.raise_for_status()
        body = bytearray()
        for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
            body.extend(chunk)
            if time.monotonic() > deadline:
                raise FetchTimeout(f"body of {path} not read within {FETCH_TIMEOUT:g}s")
        return json.loads(bytes(body))
    finally:
        resp.close()


def fetch_profile(deadline):
    return decode_profile(_get_json(PROFILE_PATH, deadline))


def fetch_services(deadline):
    return decode_services(_get_json(SERVICES_PATH, deadline))


FETCHERS = {
    "profile": fetch_profile,
    "services": fetch_services,
}


def _start_fetch(name, deadline):
    """Run one fetch on its own daemon thread; a stalled fetch never delays another."""
    future = Future()

    def run():
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(FETCHERS[name](deadline))
        except Exception as e:
            future.set_exception(e)

    threading.Thread(target=run, name=f"api-fetch-{name}", daemon=True).start()
    return future


# ----------------------------------------------------------------------
# PUBLIC API
# ----------------------------------------------------------------------
def load_core_data(*names):
    """
    Fetch the named entities ("profile", "services") concurrently.

    Every fetch is attempted regardless of the others and shares one
    deadline FETCH_TIMEOUT from now; anything still pending then counts as
    a failure. Returns (results, errors): results maps each name to its
    value or None, errors maps each failed name to its exception.
    """
    names = names or tuple(FETCHERS)
    deadline = time.monotonic() + FETCH_TIMEOUT
    futures = {name: _start_fetch(name, deadline) for name in names}
    wait(futures.values(), timeout=max(0.0, deadline - time.monotonic()))

    results, errors = {}, {}
    for name, future in futures.items():
        results[name] = None
        if not future.done():
            errors[name] = FetchTimeout(f"no response within {FETCH_TIMEOUT:g}s")
        else:
            try:
                results[name] = future.result()
            except (requests.RequestException, ValueError) as e:
                errors[name] = e

        if name in errors:
            log_event(f"Error fetching {name}: {errors[name]}", "WARN")

    return results, errors
