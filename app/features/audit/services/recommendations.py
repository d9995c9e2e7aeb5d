"""
Recommendation rules.

RECOMMENDATION_RULES is evaluated top to bottom; every rule whose predicate
holds contributes one recommendation. The result is stable-sorted by
priority, so rules of equal priority keep their table order.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from app.features.audit.schemas.audit import (
    CategoryScores,
    CoreWebVitals,
    Priority,
    Recommendation,
    RedirectChain,
    ResourceIssue,
)
from app.features.audit.services.efficiency import MEGABYTE

LCP_POOR_MS = 4000
LCP_NEEDS_IMPROVEMENT_MS = 2500
CLS_POOR = 0.25
PAGE_WEIGHT_LIMIT_MB = 3
RENDER_BLOCKING_CRITICAL_COUNT = 3
UNUSED_JS_LIMIT_BYTES = 100_000
TTFB_SLOW_MS = 800
PERFORMANCE_SCORE_FLOOR = 50


@dataclass(frozen=True)
class RecommendationContext:
    mobile_cwv: CoreWebVitals
    mobile_scores: CategoryScores
    total_byte_weight: float = 0
    slow_resources: List[ResourceIssue] = field(default_factory=list)
    render_blocking: List[Dict[str, Any]] = field(default_factory=list)
    unused_js_wasted: float = 0
    redirect_chains: List[RedirectChain] = field(default_factory=list)
    mobile_lcp_element: Optional[Dict[str, Any]] = None


Message = Tuple[str, str, str]  # title, description, impact


class RecommendationRule(NamedTuple):
    applies: Callable[[RecommendationContext], bool]
    priority: Union[Priority, Callable[[RecommendationContext], Priority]]
    category: str
    build: Callable[[RecommendationContext], Message]

    def evaluate(self, ctx: RecommendationContext) -> Optional[Recommendation]:
        if not self.applies(ctx):
            return None
        priority = self.priority(ctx) if callable(self.priority) else self.priority
        title, description, impact = self.build(ctx)
        return Recommendation(
            priority=priority,
            category=self.category,
            title=title,
            description=description,
            impact=impact,
        )


def lcp_element_label(element: Optional[Dict[str, Any]]) -> str:
    """`nodeLabel` of the LCP element, for both the flat and the table-wrapped detail format."""
    if not element:
        return ""
    node = element.get("node")
    if node is None:
        nested = element.get("items") or []
        if nested and isinstance(nested[0], dict):
            node = nested[0].get("node")
    if isinstance(node, dict):
        return node.get("nodeLabel") or ""
    return ""


def _page_weight_mb(ctx: RecommendationContext) -> float:
    return ctx.total_byte_weight / MEGABYTE


def _poor_lcp(ctx: RecommendationContext) -> Message:
    label = lcp_element_label(ctx.mobile_lcp_element)
    description = f"LCP: {ctx.mobile_cwv.lcp / 1000:.2f}s (target: <2.5s)."
    if label:
        description += f" LCP element: {label}"
    return (
        "LCP is critically slow on mobile",
        description,
        "Strong impact on mobile rankings",
    )


def _slow_lcp(ctx: RecommendationContext) -> Message:
    return (
        "LCP needs improvement on mobile",
        f"LCP: {ctx.mobile_cwv.lcp / 1000:.2f}s. Optimize the LCP element.",
        "Improves mobile SEO performance",
    )


def _high_cls(ctx: RecommendationContext) -> Message:
    return (
        "High CLS value",
        f"CLS: {ctx.mobile_cwv.cls:.3f} (target: <0.1). Elements shift while the page loads.",
        "Strong impact on UX and rankings",
    )


def _heavy_page(ctx: RecommendationContext) -> Message:
    return (
        "Page is too heavy for efficient crawling",
        f"Page size: {_page_weight_mb(ctx):.2f}MB. Large pages consume more crawl budget.",
        "Reducing page size speeds up crawling",
    )


def _slow_resources(ctx: RecommendationContext) -> Message:
    slowest = max(ctx.slow_resources, key=lambda r: r.response_time)
    return (
        f"{len(ctx.slow_resources)} slow resource(s) (>500ms)",
        f"Slowest: {(slowest.url or '')[:60]}... ({slowest.response_time:.0f}ms)",
        "Improves UX and crawl efficiency",
    )


def _render_blocking(ctx: RecommendationContext) -> Message:
    return (
        f"{len(ctx.render_blocking)} render-blocking resource(s)",
        "CSS/JS files block the first paint. Defer non-critical resources.",
        "Large improvement in LCP",
    )


def _unused_js(ctx: RecommendationContext) -> Message:
    return (
        f"{ctx.unused_js_wasted / 1024:.0f}KB of unused JavaScript",
        "Remove or defer JavaScript that is not needed for the initial load.",
        "Reduces page size and improves interactivity",
    )


def _redirect_chains(ctx: RecommendationContext) -> Message:
    return (
        f"{len(ctx.redirect_chains)} redirect chain(s)",
        "Redirect chains waste crawl budget. Update links to point at the final URLs.",
        "Critical for maximizing crawl efficiency",
    )


def _slow_ttfb(ctx: RecommendationContext) -> Message:
    return (
        "Slow server response time (TTFB)",
        f"TTFB: {ctx.mobile_cwv.ttfb:.0f}ms. Optimize the server or use a CDN.",
        "A slow TTFB affects every other metric",
    )


def _low_performance(ctx: RecommendationContext) -> Message:
    return (
        "Critically low mobile performance score",
        f"Score: {ctx.mobile_scores.performance}/100. This severely hurts mobile search rankings.",
        "Critical for mobile-first indexing",
    )


RECOMMENDATION_RULES: List[RecommendationRule] = [
    RecommendationRule(
        lambda ctx: ctx.mobile_cwv.lcp > LCP_POOR_MS,
        Priority.CRITICAL, "Core Web Vitals", _poor_lcp,
    ),
    RecommendationRule(
        lambda ctx: LCP_NEEDS_IMPROVEMENT_MS < ctx.mobile_cwv.lcp <= LCP_POOR_MS,
        Priority.HIGH, "Core Web Vitals", _slow_lcp,
    ),
    RecommendationRule(
        lambda ctx: ctx.mobile_cwv.cls > CLS_POOR,
        Priority.CRITICAL, "Core Web Vitals", _high_cls,
    ),
    RecommendationRule(
        lambda ctx: _page_weight_mb(ctx) > PAGE_WEIGHT_LIMIT_MB,
        Priority.HIGH, "Crawl Budget", _heavy_page,
    ),
    RecommendationRule(
        lambda ctx: len(ctx.slow_resources) > 0,
        Priority.HIGH, "Performance", _slow_resources,
    ),
    RecommendationRule(
        lambda ctx: len(ctx.render_blocking) > 0,
        lambda ctx: (
            Priority.CRITICAL
            if len(ctx.render_blocking) > RENDER_BLOCKING_CRITICAL_COUNT
            else Priority.HIGH
        ),
        "Rendering", _render_blocking,
    ),
    RecommendationRule(
        lambda ctx: ctx.unused_js_wasted > UNUSED_JS_LIMIT_BYTES,
        Priority.MEDIUM, "JavaScript", _unused_js,
    ),
    RecommendationRule(
        lambda ctx: len(ctx.redirect_chains) > 0,
        Priority.HIGH, "Crawl Budget", _redirect_chains,
    ),
    RecommendationRule(
        lambda ctx: ctx.mobile_cwv.ttfb > TTFB_SLOW_MS,
        Priority.CRITICAL, "Server", _slow_ttfb,
    ),
    RecommendationRule(
        lambda ctx: ctx.mobile_scores.performance < PERFORMANCE_SCORE_FLOOR,
        Priority.CRITICAL, "Performance", _low_performance,
    ),
]


def generate_recommendations(
    ctx: RecommendationContext,
    rules: Optional[List[RecommendationRule]] = None,
) -> List[Recommendation]:
    recommendations = []
    for rule in RECOMMENDATION_RULES if rules is None else rules:
        recommendation = rule.evaluate(ctx)
        if recommendation is not None:
            recommendations.append(recommendation)
    return sorted(recommendations, key=lambda r: r.priority.rank)
