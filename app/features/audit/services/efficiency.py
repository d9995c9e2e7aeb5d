from typing import Sequence, Tuple

MEGABYTE = 1024 * 1024

REDIRECT_PENALTY = 10
SLOW_RESOURCE_PENALTY = 5
RENDER_BLOCKING_PENALTY = 3

# (threshold, penalty) bands, highest first; only the first band exceeded applies
BYTE_WEIGHT_BANDS_MB: Sequence[Tuple[float, int]] = ((5, 15), (3, 10), (1, 5))
TTFB_BANDS_MS: Sequence[Tuple[float, int]] = ((1000, 15), (600, 10), (300, 5))


def _band_penalty(value: float, bands: Sequence[Tuple[float, int]]) -> int:
    for threshold, penalty in bands:
        if value > threshold:
            return penalty
    return 0


def calculate_crawl_efficiency(
    redirect_count: int,
    slow_resource_count: int,
    total_byte_weight: float,
    render_blocking_count: int,
    ttfb: float,
) -> int:
    """
    Crawl-efficiency score in [0, 100].

    Starts at 100 and subtracts per-item penalties for redirects, slow
    resources and render-blocking resources, plus banded penalties for the
    page weight and the time to first byte.
    """
    score = 100
    score -= redirect_count * REDIRECT_PENALTY
    score -= slow_resource_count * SLOW_RESOURCE_PENALTY
    score -= _band_penalty(total_byte_weight / MEGABYTE, BYTE_WEIGHT_BANDS_MB)
    score -= render_blocking_count * RENDER_BLOCKING_PENALTY
    score -= _band_penalty(ttfb, TTFB_BANDS_MS)
    return max(0, min(100, score))
