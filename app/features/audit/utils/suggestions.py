from typing import Sequence, Tuple

# (error-message markers, hint) pairs; first match wins
FAILURE_HINTS: Sequence[Tuple[Tuple[str, ...], str]] = (
    (
        ("FAILED_DOCUMENT_REQUEST", "ERR_TIMED_OUT"),
        "The page took too long to load. Possible causes:\n"
        "1. The website is temporarily slow or unavailable\n"
        "2. The site blocks automated requests\n"
        "3. Try again in a few minutes",
    ),
    (
        ("NO_FCP",),
        "The page did not render any content. The site may be blocking Google's crawler.",
    ),
    (
        ("DNS_FAILURE",),
        "The domain name could not be resolved. Check that the URL is correct "
        "and the site is publicly reachable.",
    ),
)


def suggest_fix(error_message: str) -> str:
    """Pick a human-readable hint for a PageSpeed Insights failure, or "" if none applies."""
    for markers, hint in FAILURE_HINTS:
        if any(marker in error_message for marker in markers):
            return hint
    return ""
