from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends

from reconcile.shared.logging import get_logger
from reconcile.shared.normalization import normalize_phone

from ..config import get_settings
from ..errors import IdentityRequestError, MissingIdentifierError
from ..models import IdentifyRequest, IdentifyResponse
from ..services import IdentityService

logger = get_logger("identity.routes")

router = APIRouter(tags=["identity"])


@lru_cache(maxsize=1)
def get_service() -> IdentityService:
    return IdentityService()


@router.post("/identify", response_model=IdentifyResponse)
async def identify(
    request: IdentifyRequest,
    service: IdentityService = Depends(get_service),
) -> IdentifyResponse:
    if request.is_empty():
        raise MissingIdentifierError()

    region = get_settings().phone_default_region
    if region and request.phone_number:
        try:
            request.phone_number = normalize_phone(request.phone_number, region)
        except ValueError as exc:
            raise IdentityRequestError(str(exc)) from exc

    logger.info(
        "identify_request_received",
        email=request.email,
        phone_number=request.phone_number,
    )
    try:
        return await service.identify(request)
    except IdentityRequestError:
        raise
    except Exception as exc:
        logger.exception(
            "identify_failed",
            email=request.email,
            phone_number=request.phone_number,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise


__all__ = ["get_service", "router"]
