"""Public service endpoints."""

from fastapi import APIRouter, Depends, status

from brandsite.api.deps import get_content, get_settings
from brandsite.config import Settings
from brandsite.schemas.service import (
    ServiceContactResponse,
    ServiceListResponse,
    ServiceResponse,
)
from brandsite.services.contact import build_contact_links
from brandsite.services.content import ContentService

router = APIRouter(
    prefix="/services",
    tags=["Services"],
)


@router.get(
    "",
    response_model=ServiceListResponse,
    status_code=status.HTTP_200_OK,
    summary="List services",
    description="All services ordered by `order_index`.",
)
async def list_services(
    content: ContentService = Depends(get_content),
) -> ServiceListResponse:
    services = await content.list_services()
    return ServiceListResponse(
        services=[ServiceResponse.model_validate(service) for service in services]
    )


@router.get(
    "/{service_id}",
    response_model=ServiceResponse,
    status_code=status.HTTP_200_OK,
    summary="Get service detail",
    description="Returns 404 when the service does not exist; clients redirect to the listing.",
)
async def get_service(
    service_id: int,
    content: ContentService = Depends(get_content),
) -> ServiceResponse:
    return ServiceResponse.model_validate(await content.get_service(service_id))


@router.get(
    "/{service_id}/contact",
    response_model=ServiceContactResponse,
    status_code=status.HTTP_200_OK,
    summary="Get contact links for a service",
)
async def get_service_contact(
    service_id: int,
    content: ContentService = Depends(get_content),
    settings: Settings = Depends(get_settings),
) -> ServiceContactResponse:
    service = await content.get_service(service_id)
    return build_contact_links(settings, service.id, service.title)
