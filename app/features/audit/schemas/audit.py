from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base for report models: immutable, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_ORDER.index(self)


PRIORITY_ORDER = [Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM, Priority.LOW]


class CoreWebVitals(ReportModel):
    lcp: float = 0
    fid: float = 0
    cls: float = 0
    ttfb: float = 0
    fcp: float = 0
    inp: float = 0


class CategoryScores(ReportModel):
    performance: int = 0
    accessibility: int = 0
    best_practices: int = 0
    seo: int = 0


class DeviceScores(ReportModel):
    mobile: CategoryScores
    desktop: CategoryScores


class DeviceVitals(ReportModel):
    mobile: CoreWebVitals
    desktop: CoreWebVitals


class CrawlEfficiency(ReportModel):
    score: int
    total_byte_weight: float
    redirect_count: int
    slow_resource_count: int
    render_blocking_count: int


class LcpElements(ReportModel):
    mobile: Optional[Dict[str, Any]] = None
    desktop: Optional[Dict[str, Any]] = None


class ResourceIssue(ReportModel):
    url: Optional[str] = None
    response_time: float
    transfer_size: Optional[float] = None


class RedirectChain(ReportModel):
    chain: List[str]
    wasted_ms: Optional[float] = None


class AuditIssues(ReportModel):
    slow_resources: List[ResourceIssue] = Field(default_factory=list)
    render_blocking: List[Dict[str, Any]] = Field(default_factory=list)
    unused_js: List[Dict[str, Any]] = Field(default_factory=list, alias="unusedJS")
    unused_js_wasted_bytes: float = Field(default=0, alias="unusedJSWastedBytes")
    redirect_chains: List[RedirectChain] = Field(default_factory=list)
    redirects: List[Dict[str, Any]] = Field(default_factory=list)


class Recommendation(ReportModel):
    priority: Priority
    category: str
    title: str
    description: str
    impact: str


class AuditReport(ReportModel):
    url: str
    timestamp: str
    scores: DeviceScores
    cwv: DeviceVitals
    crawl_efficiency: CrawlEfficiency
    lcp_elements: LcpElements
    issues: AuditIssues
    recommendations: List[Recommendation]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://example.com",
                "timestamp": "2025-01-31T09:15:02.123Z",
                "scores": {
                    "mobile": {"performance": 62, "accessibility": 91, "bestPractices": 96, "seo": 100},
                    "desktop": {"performance": 88, "accessibility": 91, "bestPractices": 96, "seo": 100},
                },
                "crawlEfficiency": {
                    "score": 72,
                    "totalByteWeight": 2412345,
                    "redirectCount": 1,
                    "slowResourceCount": 2,
                    "renderBlockingCount": 1,
                },
                "recommendations": [
                    {
                        "priority": "high",
                        "category": "Core Web Vitals",
                        "title": "LCP needs improvement on mobile",
                        "description": "LCP: 3.12s. Optimize the LCP element.",
                        "impact": "Improves mobile SEO performance",
                    }
                ],
            }
        }
    )
