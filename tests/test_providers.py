import pytest
import requests

from core.config import Settings
from core.errors import ProviderError
from core.providers import fetch_serp, google_search_url, run_actor


def test_google_search_url_quotes_the_query():
    assert google_search_url("café") == "https://www.google.com/search?q=caf%C3%A9"


def test_fetch_serp_posts_zone_and_bearer_token(fake_post, settings):
    fake_post.reply(200, {"organic": []})
    assert fetch_serp("paris", settings) == {"organic": []}

    call = fake_post.calls[0]
    assert call["url"] == settings.brightdata_endpoint
    assert call["headers"] == {"Authorization": "Bearer bd-test-key"}
    assert call["json"] == {
        "zone": "serp_api1",
        "url": "https://www.google.com/search?q=paris",
        "format": "json",
    }
    assert call["timeout"] == settings.http_timeout_seconds


def test_missing_api_keys_fail_before_any_request(fake_post):
    with pytest.raises(ProviderError, match="BRIGHTDATA_API_KEY"):
        fetch_serp("paris", Settings())
    with pytest.raises(ProviderError, match="APIFY_API_KEY"):
        run_actor("jupri~kayak-flights", {}, Settings())
    assert fake_post.calls == []


def test_non_success_status_raises(fake_post, settings):
    fake_post.reply(502, None, text="Bad gateway")
    with pytest.raises(ProviderError) as excinfo:
        fetch_serp("paris", settings)
    assert excinfo.value.status_code == 502
    assert excinfo.value.provider == "brightdata"


def test_unparsable_body_raises(fake_post, settings, not_json):
    fake_post.reply(200, not_json, text="<html>")
    with pytest.raises(ProviderError, match="not valid JSON"):
        fetch_serp("paris", settings)


@pytest.mark.parametrize("error", [
    requests.Timeout("read timed out"),
    requests.ConnectionError("connection refused"),
])
def test_transport_errors_raise_provider_error(fake_post, settings, error):
    fake_post.error = error
    with pytest.raises(ProviderError):
        run_actor("jupri~kayak-flights", {}, settings)


def test_run_actor_returns_dataset_items(fake_post, settings):
    fake_post.reply(200, [{"url": "https://k/1"}])
    items = run_actor("jupri~kayak-flights", {"origin.0": "SFO"}, settings)
    assert items == [{"url": "https://k/1"}]

    call = fake_post.calls[0]
    assert call["url"] == (
        "https://api.apify.com/v2/acts/jupri~kayak-flights/run-sync-get-dataset-items"
    )
    assert call["json"] == {"origin.0": "SFO"}
    assert call["params"]["token"] == "apify-test-token"
    assert call["timeout"] == settings.actor_timeout_seconds


def test_run_actor_rejects_non_list_body(fake_post, settings):
    fake_post.reply(200, {"error": {"type": "run-failed"}})
    with pytest.raises(ProviderError, match="JSON array"):
        run_actor("jupri~kayak-flights", {}, settings)
