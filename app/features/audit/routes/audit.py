from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.features.audit.schemas.audit import AuditReport
from app.features.audit.services.audit import run_audit
from app.features.audit.services.pagespeed_client import PageSpeedClient, get_pagespeed_client
from app.platform.logger import get_logger

logger = get_logger("audit_routes")
router = APIRouter(tags=["Audit"])


@router.get("/audit", response_model=AuditReport)
async def audit_page(
    url: Optional[str] = Query(default=None, description="Absolute URL of the page to audit"),
    client: PageSpeedClient = Depends(get_pagespeed_client),
):
    """
    Run a PageSpeed Insights audit (mobile + desktop) and return the report.

    - 400 `{error}` when `url` is missing
    - 500 `{error, message}` when the API key is not configured
    - 500 `{error, suggestion, url, timestamp}` when PageSpeed Insights fails
    """
    logger.info(f"Starting audit for URL: {url}")
    return await run_audit(url, client)
