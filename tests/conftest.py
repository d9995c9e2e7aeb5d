"""
Test configuration and fixtures for the Lighthouse Audit API.

Provides a TestClient, a factory for PageSpeed Insights payloads, and a
fixture that swaps the PageSpeed client for one backed by httpx.MockTransport
so no test ever reaches the real API.
"""

import os
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional

import httpx
import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

load_dotenv()

# Never let a developer's real key leak into the tests
os.environ["PSI_API_KEY"] = "test-psi-key"

TEST_API_KEY = "test-psi-key"


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    with TestClient(test_app) as test_client:
        yield test_client


def build_psi_payload(
    *,
    lcp: float = 0,
    fid: float = 0,
    cls: float = 0,
    ttfb: float = 0,
    fcp: float = 0,
    inp: float = 0,
    scores: Optional[Dict[str, float]] = None,
    total_byte_weight: float = 0,
    network_requests: Iterable[Dict[str, Any]] = (),
    render_blocking: Iterable[Dict[str, Any]] = (),
    unused_js: Iterable[Dict[str, Any]] = (),
    unused_js_wasted: float = 0,
    redirects: Iterable[Dict[str, Any]] = (),
    lcp_element: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """A runPagespeed response body with the audits the report reads."""
    scores = scores if scores is not None else {
        "performance": 0.9,
        "accessibility": 0.95,
        "best-practices": 1.0,
        "seo": 0.92,
    }
    audits = {
        "largest-contentful-paint": {"numericValue": lcp},
        "max-potential-fid": {"numericValue": fid},
        "cumulative-layout-shift": {"numericValue": cls},
        "server-response-time": {"numericValue": ttfb},
        "first-contentful-paint": {"numericValue": fcp},
        "interaction-to-next-paint": {"numericValue": inp},
        "total-byte-weight": {"numericValue": total_byte_weight},
        "network-requests": {"details": {"items": list(network_requests)}},
        "render-blocking-resources": {"details": {"items": list(render_blocking)}},
        "unused-javascript": {
            "numericValue": unused_js_wasted,
            "details": {"items": list(unused_js)},
        },
        "redirects": {"details": {"items": list(redirects)}},
    }
    if lcp_element is not None:
        audits["largest-contentful-paint-element"] = {"details": {"items": [lcp_element]}}

    return {
        "id": "https://example.com/",
        "lighthouseResult": {
            "audits": audits,
            "categories": {name: {"score": score} for name, score in scores.items()},
        },
    }


@pytest.fixture
def psi_payload() -> Callable[..., Dict[str, Any]]:
    return build_psi_payload


class RecordingHandler:
    """MockTransport handler answering per strategy and remembering every request."""

    def __init__(self, responses: Dict[str, Any]):
        self.responses = responses
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.responses[request.url.params["strategy"]]
        if callable(answer):
            return answer(request)
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    @property
    def strategies(self) -> List[str]:
        return [r.url.params["strategy"] for r in self.requests]


@pytest.fixture
def pagespeed_handler() -> Callable[..., RecordingHandler]:
    return RecordingHandler


@pytest.fixture
def override_pagespeed(test_app):
    """Install a PageSpeed client backed by a RecordingHandler for endpoint tests."""
    from app.features.audit.services.pagespeed_client import PageSpeedClient, get_pagespeed_client

    def install(handler: RecordingHandler, api_key: Optional[str] = TEST_API_KEY) -> RecordingHandler:
        test_app.dependency_overrides[get_pagespeed_client] = lambda: PageSpeedClient(
            api_key=api_key, transport=httpx.MockTransport(handler)
        )
        return handler

    yield install

    test_app.dependency_overrides.pop(get_pagespeed_client, None)
