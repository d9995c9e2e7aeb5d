import math

from app.features.audit.schemas.audit import CategoryScores, CoreWebVitals
from app.features.audit.schemas.lighthouse import LighthouseResult

# report field -> Lighthouse audit id
VITALS_AUDITS = {
    "lcp": "largest-contentful-paint",
    "fid": "max-potential-fid",
    "cls": "cumulative-layout-shift",
    "ttfb": "server-response-time",
    "fcp": "first-contentful-paint",
    "inp": "interaction-to-next-paint",
}

# report field -> Lighthouse category id
SCORE_CATEGORIES = {
    "performance": "performance",
    "accessibility": "accessibility",
    "best_practices": "best-practices",
    "seo": "seo",
}


def to_percent(score: float) -> int:
    """Lighthouse [0, 1] score as an integer percentage, halves rounded up. No clamping."""
    return math.floor(score * 100 + 0.5)


def extract_core_web_vitals(result: LighthouseResult) -> CoreWebVitals:
    return CoreWebVitals(
        **{field: result.numeric_value(audit_id) for field, audit_id in VITALS_AUDITS.items()}
    )


def extract_category_scores(result: LighthouseResult) -> CategoryScores:
    return CategoryScores(
        **{
            field: to_percent(result.category_score(category_id))
            for field, category_id in SCORE_CATEGORIES.items()
        }
    )
