# tests/conftest.py
from typing import Optional

import pytest
from pydantic import StrictBool, StrictFloat, StrictStr

from core import providers
from core.config import Settings
from core.models import CoercionRules, NonBlankStr, PassthroughRecord, ProjectedRecord


_NOT_JSON = object()


class FakeResponse:
    """Stand-in for requests.Response with just what providers.py touches."""

    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json_data is _NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json_data


@pytest.fixture
def settings():
    return Settings(brightdata_api_key="bd-test-key", apify_api_key="apify-test-token")


@pytest.fixture
def fake_post(monkeypatch):
    """Replace requests.post inside core.providers; records every call.

    Call `fake_post.reply(status, json_data, text)` or set `fake_post.error`
    (an exception instance) before the call under test.
    """

    class _FakePost:
        def __init__(self):
            self.calls = []
            self.response = FakeResponse(200, {})
            self.error = None

        def reply(self, status_code=200, json_data=None, text=""):
            self.response = FakeResponse(status_code, json_data, text)

        def __call__(self, url, **kwargs):
            self.calls.append({"url": url, **kwargs})
            if self.error is not None:
                raise self.error
            return self.response

    fake = _FakePost()
    monkeypatch.setattr(providers.requests, "post", fake)
    return fake


@pytest.fixture
def not_json():
    return _NOT_JSON


# --- A small schema that exercises nesting, arrays and nullability ---
class Geo(ProjectedRecord):
    lat: StrictFloat
    lon: StrictFloat
    label: Optional[StrictStr] = None


class Place(PassthroughRecord):
    id: NonBlankStr
    score: Optional[StrictFloat] = None
    open: Optional[StrictBool] = None
    geo: Optional[Geo] = None
    tags: Optional[list[StrictStr]] = None


@pytest.fixture
def place_schema():
    return Place


@pytest.fixture
def place_rules():
    return CoercionRules(
        extractors={"score": lambda raw: raw.get("stats", {}).get("score")},
        fallbacks={"id": "", "score": None},
        viable=lambda record: bool(record.get("id")),
    )
