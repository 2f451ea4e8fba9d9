from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Success body for the tool endpoints: the payload itself, camelCase aliases applied.
    """
    content = jsonable_encoder(data, by_alias=True) if data is not None else {}
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    *,
    message: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    """
    Single source of truth for ALL error bodies: `{"error": message}`.
    """
    return JSONResponse(status_code=status_code, content={"error": message})


def envelope_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Status envelope used by the service endpoints (health, info).
    Automatically sets status = "success" if < 400 else "error"
    """
    status_str = "success" if status_code < 400 else "error"
    data = jsonable_encoder(data) if data is not None else {}

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "status": status_str,
            "message": message,
            "data": data,
        },
    )
