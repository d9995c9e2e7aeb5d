import httpx
import pytest

from app.features.audit.exceptions import ConfigurationError, UpstreamError
from app.features.audit.services.pagespeed_client import PageSpeedClient

URL = "https://example.com/"


def make_client(handler, api_key="test-psi-key"):
    return PageSpeedClient(api_key=api_key, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetches_both_strategies(psi_payload, pagespeed_handler):
    handler = pagespeed_handler({"mobile": psi_payload(lcp=3200), "desktop": psi_payload(lcp=1100)})

    mobile, desktop = await make_client(handler).fetch_strategies(URL)

    assert mobile.numeric_value("largest-contentful-paint") == 3200
    assert desktop.numeric_value("largest-contentful-paint") == 1100
    assert sorted(handler.strategies) == ["desktop", "mobile"]

    params = handler.requests[0].url.params
    assert params["url"] == URL
    assert params["key"] == "test-psi-key"
    assert params.get_list("category") == ["PERFORMANCE", "ACCESSIBILITY", "BEST_PRACTICES", "SEO"]


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [None, "", "your_pagespeed_insights_api_key_here"])
async def test_unconfigured_key_sends_nothing(api_key, psi_payload, pagespeed_handler):
    handler = pagespeed_handler({"mobile": psi_payload(), "desktop": psi_payload()})

    with pytest.raises(ConfigurationError) as exc_info:
        await make_client(handler, api_key=api_key).fetch_strategies(URL)

    assert handler.requests == []
    assert set(exc_info.value.to_content()) == {"error", "message"}


@pytest.mark.asyncio
async def test_mobile_rate_limited(psi_payload, pagespeed_handler):
    handler = pagespeed_handler(
        {
            "mobile": httpx.Response(429, json={"error": {"code": 429, "message": "Quota exceeded for quota metric"}}),
            "desktop": psi_payload(),
        }
    )

    with pytest.raises(UpstreamError) as exc_info:
        await make_client(handler).fetch_strategies(URL)

    assert exc_info.value.message == "Mobile audit failed: Quota exceeded for quota metric"
    assert exc_info.value.url == URL
    # both calls were issued and awaited; the desktop result is discarded
    assert sorted(handler.strategies) == ["desktop", "mobile"]


@pytest.mark.asyncio
async def test_desktop_error_without_body_uses_reason_phrase(psi_payload, pagespeed_handler):
    handler = pagespeed_handler({"mobile": psi_payload(), "desktop": httpx.Response(500, text="oops")})

    with pytest.raises(UpstreamError) as exc_info:
        await make_client(handler).fetch_strategies(URL)

    assert exc_info.value.message == "Desktop audit failed: Internal Server Error"


@pytest.mark.asyncio
async def test_provider_error_in_body(psi_payload, pagespeed_handler):
    handler = pagespeed_handler(
        {
            "mobile": {
                "error": {
                    "code": 500,
                    "message": "Lighthouse returned error: FAILED_DOCUMENT_REQUEST. (Details: net::ERR_TIMED_OUT)",
                }
            },
            "desktop": psi_payload(),
        }
    )

    with pytest.raises(UpstreamError) as exc_info:
        await make_client(handler).fetch_strategies(URL)

    assert "FAILED_DOCUMENT_REQUEST" in exc_info.value.message
    assert exc_info.value.suggestion.startswith("The page took too long to load")


@pytest.mark.asyncio
async def test_provider_error_without_message(psi_payload, pagespeed_handler):
    handler = pagespeed_handler({"mobile": psi_payload(), "desktop": {"error": {"code": 400}}})

    with pytest.raises(UpstreamError) as exc_info:
        await make_client(handler).fetch_strategies(URL)

    assert exc_info.value.message == "Unknown PageSpeed Insights API error"


@pytest.mark.asyncio
async def test_missing_lighthouse_result(psi_payload, pagespeed_handler):
    handler = pagespeed_handler({"mobile": psi_payload(), "desktop": {"id": URL}})

    with pytest.raises(UpstreamError) as exc_info:
        await make_client(handler).fetch_strategies(URL)

    assert exc_info.value.message == "Invalid PageSpeed Insights response: missing Lighthouse data"
    assert exc_info.value.suggestion == ""


@pytest.mark.asyncio
async def test_unparseable_body(psi_payload, pagespeed_handler):
    handler = pagespeed_handler({"mobile": httpx.Response(200, text="<html>"), "desktop": psi_payload()})

    with pytest.raises(UpstreamError):
        await make_client(handler).fetch_strategies(URL)


@pytest.mark.asyncio
async def test_transport_failure(psi_payload, pagespeed_handler):
    def refuse(request):
        raise httpx.ConnectError("DNS_FAILURE: name not resolved", request=request)

    handler = pagespeed_handler({"mobile": psi_payload(), "desktop": refuse})

    with pytest.raises(UpstreamError) as exc_info:
        await make_client(handler).fetch_strategies(URL)

    assert exc_info.value.message.startswith("Desktop audit failed")
    assert "domain name could not be resolved" in exc_info.value.suggestion


@pytest.mark.asyncio
async def test_invalid_url_failure_is_upstream_error(psi_payload, pagespeed_handler):
    def reject(request):
        raise httpx.InvalidURL("URL too long")

    handler = pagespeed_handler({"mobile": reject, "desktop": psi_payload()})

    with pytest.raises(UpstreamError) as exc_info:
        await make_client(handler).fetch_strategies(URL)

    assert exc_info.value.message == "Mobile audit failed: URL too long"
    assert exc_info.value.url == URL
    assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)
