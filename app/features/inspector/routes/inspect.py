from fastapi import APIRouter, Depends

from app.features.inspector.schemas.inspect import InspectRequest
from app.features.inspector.services.inspection import InspectionService
from app.platform.config import Settings, get_settings
from app.platform.exceptions import SiteToolsError
from app.platform.logger import get_logger
from app.platform.response import api_response, error_response

logger = get_logger("inspect_routes")
router = APIRouter(tags=["inspector"])


def get_inspection_service(settings: Settings = Depends(get_settings)) -> InspectionService:
    return InspectionService(settings)


@router.post("/inspect")
async def inspect_site(
    payload: InspectRequest,
    service: InspectionService = Depends(get_inspection_service),
):
    """
    Fetch a page and return its title, AI summary, preview image and link health.
    """
    try:
        result = await service.inspect(payload.url)
    except SiteToolsError as e:
        logger.warning(f"Inspection failed for {payload.url!r}: {e.message}")
        return error_response(message=e.message, status_code=e.status_code)

    return api_response(data=result)
