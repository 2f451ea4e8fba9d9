from fastapi import APIRouter, Depends

from app.features.audit.schemas.audit import AuditIn
from app.features.audit.services.audit import PageSpeedClient
from app.platform.config import Settings, get_settings
from app.platform.exceptions import SiteToolsError
from app.platform.logger import get_logger
from app.platform.response import api_response, error_response

logger = get_logger("audit_routes")
router = APIRouter(tags=["audit"])


def get_pagespeed_client(settings: Settings = Depends(get_settings)) -> PageSpeedClient:
    return PageSpeedClient(settings)


@router.post("/audit")
async def audit_page(
    audit_in: AuditIn,
    client: PageSpeedClient = Depends(get_pagespeed_client),
):
    try:
        scores = await client.run_audit(audit_in.url)
    except SiteToolsError as e:
        logger.warning(f"Audit failed for {audit_in.url!r}: {e.message}")
        return error_response(message=e.message, status_code=e.status_code)

    return api_response(data=scores)
