"""
Issue detection over a single Lighthouse run.

All functions are pure and total: missing audits produce empty results.
The audit only inspects the mobile run.
"""
from typing import Any, Dict, List, Tuple

from app.features.audit.schemas.audit import RedirectChain, ResourceIssue
from app.features.audit.schemas.lighthouse import LighthouseResult

SLOW_RESPONSE_MS = 500


def find_slow_resources(result: LighthouseResult) -> List[ResourceIssue]:
    """Network requests whose response time exceeds SLOW_RESPONSE_MS."""
    slow = []
    for request in result.items("network-requests"):
        response_time = request.get("responseTime") or 0
        if response_time > SLOW_RESPONSE_MS:
            slow.append(
                ResourceIssue(
                    url=request.get("url"),
                    response_time=response_time,
                    transfer_size=request.get("transferSize"),
                )
            )
    return slow


def render_blocking_resources(result: LighthouseResult) -> List[Dict[str, Any]]:
    return result.items("render-blocking-resources")


def unused_javascript(result: LighthouseResult) -> Tuple[List[Dict[str, Any]], float]:
    """Unused-JS entries and the total wasted bytes."""
    return result.items("unused-javascript"), result.numeric_value("unused-javascript")


def redirect_items(result: LighthouseResult) -> List[Dict[str, Any]]:
    return result.items("redirects")


def detect_redirect_chains(redirects: List[Dict[str, Any]]) -> List[RedirectChain]:
    """
    Follow `url -> endUrl` links starting from every redirect.

    A walk stops when the next url is not a known redirect or was already
    visited in this walk, so cycles terminate. A chain is recorded when at
    least two redirects were followed; its final destination is appended
    when it is not already part of the chain. Chains are computed per
    starting redirect, so the same url can appear in several chains.
    """
    by_url = {r.get("url"): r for r in redirects}
    chains = []

    for redirect in redirects:
        start, end = redirect.get("url"), redirect.get("endUrl")
        if not start or start == end:
            continue

        chain = [start]
        current = end
        while current in by_url and current not in chain:
            chain.append(current)
            current = by_url[current].get("endUrl") or current

        if len(chain) > 1:
            if current is not None and current not in chain:
                chain.append(current)
            chains.append(RedirectChain(chain=chain, wasted_ms=redirect.get("wastedMs")))

    return chains
