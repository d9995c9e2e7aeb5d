"""
PageSpeed Insights client.

Runs the mobile and desktop strategies for one URL concurrently and returns
both parsed results. Any failure aborts the whole audit; nothing is retried
here, callers retry out-of-band.
"""
import asyncio
from typing import Optional, Tuple

import httpx
from pydantic import ValidationError

from app.features.audit.exceptions import ConfigurationError, UpstreamError
from app.features.audit.schemas.lighthouse import LighthouseResult, PageSpeedResponse
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)

STRATEGIES = ("mobile", "desktop")
CATEGORIES = ("PERFORMANCE", "ACCESSIBILITY", "BEST_PRACTICES", "SEO")

STRATEGY_LABELS = {"mobile": "Mobile", "desktop": "Desktop"}


class PageSpeedClient:
    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = settings.PSI_API_URL,
        timeout: float = settings.PSI_TIMEOUT_SECONDS,
        placeholder_key: str = settings.PSI_PLACEHOLDER_API_KEY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.placeholder_key = placeholder_key
        self.transport = transport

    def ensure_configured(self) -> str:
        if not self.api_key or self.api_key == self.placeholder_key:
            raise ConfigurationError(
                "PSI_API_KEY is not configured",
                "Set a Google PageSpeed Insights API key in the PSI_API_KEY environment variable (.env).",
            )
        return self.api_key

    def _params(self, url: str, api_key: str, strategy: str):
        params = [("url", url), ("key", api_key), ("strategy", strategy)]
        params.extend(("category", category) for category in CATEGORIES)
        return params

    async def fetch_strategies(self, url: str) -> Tuple[LighthouseResult, LighthouseResult]:
        """
        Fetch mobile and desktop Lighthouse results for `url`.

        Raises:
            ConfigurationError: API key missing or placeholder (no request is sent)
            UpstreamError: transport failure, non-2xx status, provider error,
                missing lighthouseResult or an unparseable body
        """
        api_key = self.ensure_configured()

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            logger.info(f"Requesting PageSpeed Insights runs for {url}")
            responses = await asyncio.gather(
                *(client.get(self.api_url, params=self._params(url, api_key, s)) for s in STRATEGIES),
                return_exceptions=True,
            )

        # Both calls have settled; the first failure (mobile before desktop) wins
        for strategy, response in zip(STRATEGIES, responses):
            # httpx.InvalidURL and other client-side errors are not httpx.HTTPError
            if isinstance(response, Exception):
                logger.warning(f"PageSpeed {strategy} request failed for {url}: {response!r}")
                raise UpstreamError(
                    f"{STRATEGY_LABELS[strategy]} audit failed: {response}", url=url
                ) from response
            if isinstance(response, BaseException):
                raise response
            self._raise_for_status(strategy, response, url)

        mobile, desktop = (self._parse(strategy, response, url) for strategy, response in zip(STRATEGIES, responses))

        if mobile.error is not None or desktop.error is not None:
            message = (
                (mobile.error.message if mobile.error else None)
                or (desktop.error.message if desktop.error else None)
                or "Unknown PageSpeed Insights API error"
            )
            raise UpstreamError(message, url=url)

        if mobile.lighthouse_result is None or desktop.lighthouse_result is None:
            raise UpstreamError(
                "Invalid PageSpeed Insights response: missing Lighthouse data", url=url
            )

        logger.info(f"PageSpeed Insights runs completed for {url}")
        return mobile.lighthouse_result, desktop.lighthouse_result

    def _raise_for_status(self, strategy: str, response: httpx.Response, url: str) -> None:
        if response.is_success:
            return

        provider_message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            provider_message = body["error"].get("message")

        reason = provider_message or response.reason_phrase or f"HTTP {response.status_code}"
        logger.warning(f"PageSpeed {strategy} run returned HTTP {response.status_code} for {url}: {reason}")
        raise UpstreamError(f"{STRATEGY_LABELS[strategy]} audit failed: {reason}", url=url)

    def _parse(self, strategy: str, response: httpx.Response, url: str) -> PageSpeedResponse:
        try:
            return PageSpeedResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Malformed PageSpeed {strategy} response for {url}: {e}")
            raise UpstreamError(
                f"Invalid PageSpeed Insights response: malformed {strategy} data", url=url
            ) from e


def get_pagespeed_client() -> PageSpeedClient:
    """FastAPI dependency; overridden in tests."""
    return PageSpeedClient(api_key=settings.PSI_API_KEY)
