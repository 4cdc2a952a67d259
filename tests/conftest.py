import json
import sys
from pathlib import Path

import pytest

# Ensure the top-level modules are importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings  # noqa: E402


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload or {})

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class DummySession:
    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response or DummyResponse(payload={"features": []})
        self.error = error

    def respond(self, status_code=200, payload=None, text=None):
        self.response = DummyResponse(status_code=status_code, payload=payload, text=text)
        return self

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def _make_feature(name, distance=None, center=None, category="grocery, supermarket"):
    properties = {"category": category}
    if distance is not None:
        properties["distance"] = distance
    feature = {
        "type": "Feature",
        "text": name,
        "place_name": f"{name}, 1 Main St, New York, NY",
        "properties": properties,
    }
    if center is not None:
        feature["center"] = center
    return feature


@pytest.fixture()
def make_feature():
    return _make_feature


@pytest.fixture()
def dummy_session():
    return DummySession()


@pytest.fixture()
def settings():
    return Settings(
        mapbox_token="server-token",
        mapbox_public_token="public-token",
        evaluator_url="http://evaluator.test",
        request_timeout=5,
    )
