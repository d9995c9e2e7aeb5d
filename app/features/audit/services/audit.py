from typing import Optional

from app.features.audit.exceptions import MissingParameter
from app.features.audit.schemas.audit import (
    AuditIssues,
    AuditReport,
    CrawlEfficiency,
    DeviceScores,
    DeviceVitals,
    LcpElements,
)
from app.features.audit.schemas.lighthouse import LighthouseResult
from app.features.audit.services.efficiency import calculate_crawl_efficiency
from app.features.audit.services.issues import (
    detect_redirect_chains,
    find_slow_resources,
    redirect_items,
    render_blocking_resources,
    unused_javascript,
)
from app.features.audit.services.metrics import extract_category_scores, extract_core_web_vitals
from app.features.audit.services.pagespeed_client import PageSpeedClient
from app.features.audit.services.recommendations import (
    RecommendationContext,
    generate_recommendations,
)
from app.platform.logger import get_logger
from app.platform.utils.timestamps import utc_timestamp

logger = get_logger(__name__)

LCP_ELEMENT_AUDIT = "largest-contentful-paint-element"


def validate_audit_url(url: Optional[str]) -> str:
    """Presence check only; the url is passed to PageSpeed Insights as given."""
    if not url:
        raise MissingParameter("The url query parameter is required")
    return url


def build_audit_report(url: str, mobile: LighthouseResult, desktop: LighthouseResult) -> AuditReport:
    """Turn the mobile and desktop Lighthouse runs into an AuditReport."""
    cwv = DeviceVitals(mobile=extract_core_web_vitals(mobile), desktop=extract_core_web_vitals(desktop))
    scores = DeviceScores(mobile=extract_category_scores(mobile), desktop=extract_category_scores(desktop))

    total_byte_weight = mobile.numeric_value("total-byte-weight")
    slow_resources = find_slow_resources(mobile)
    render_blocking = render_blocking_resources(mobile)
    unused_js, unused_js_wasted = unused_javascript(mobile)
    redirects = redirect_items(mobile)
    redirect_chains = detect_redirect_chains(redirects)

    crawl_efficiency = CrawlEfficiency(
        score=calculate_crawl_efficiency(
            redirect_count=len(redirects),
            slow_resource_count=len(slow_resources),
            total_byte_weight=total_byte_weight,
            render_blocking_count=len(render_blocking),
            ttfb=cwv.mobile.ttfb,
        ),
        total_byte_weight=total_byte_weight,
        redirect_count=len(redirects),
        slow_resource_count=len(slow_resources),
        render_blocking_count=len(render_blocking),
    )

    lcp_elements = LcpElements(
        mobile=mobile.first_item(LCP_ELEMENT_AUDIT),
        desktop=desktop.first_item(LCP_ELEMENT_AUDIT),
    )

    recommendations = generate_recommendations(
        RecommendationContext(
            mobile_cwv=cwv.mobile,
            mobile_scores=scores.mobile,
            total_byte_weight=total_byte_weight,
            slow_resources=slow_resources,
            render_blocking=render_blocking,
            unused_js_wasted=unused_js_wasted,
            redirect_chains=redirect_chains,
            mobile_lcp_element=lcp_elements.mobile,
        )
    )

    return AuditReport(
        url=url,
        timestamp=utc_timestamp(),
        scores=scores,
        cwv=cwv,
        crawl_efficiency=crawl_efficiency,
        lcp_elements=lcp_elements,
        issues=AuditIssues(
            slow_resources=slow_resources,
            render_blocking=render_blocking,
            unused_js=unused_js,
            unused_js_wasted_bytes=unused_js_wasted,
            redirect_chains=redirect_chains,
            redirects=redirects,
        ),
        recommendations=recommendations,
    )


async def run_audit(url: Optional[str], client: PageSpeedClient) -> AuditReport:
    """Validate, fetch both strategies, and assemble the report."""
    target = validate_audit_url(url)
    mobile, desktop = await client.fetch_strategies(target)
    report = build_audit_report(target, mobile, desktop)
    logger.info(
        f"Audit completed for {target}: mobile performance {report.scores.mobile.performance}, "
        f"crawl efficiency {report.crawl_efficiency.score}, "
        f"{len(report.recommendations)} recommendation(s)"
    )
    return report
